"""
================================================================================
Step Registry Tests
================================================================================

Pattern compilation, first-match dispatch, overlap rejection and argument
transformations.

================================================================================
"""

import allure
import pytest

from acceptance.framework.steps import (
    AmbiguousStepError,
    Argument,
    Given,
    StepRegistry,
    Then,
    Transformation,
    UndefinedStepError,
    When,
    compile_turnip,
)


def handler(*args):
    return args


def other_handler(*args):
    return args


@allure.epic("Step Dispatch")
@allure.feature("Patterns")
class TestPatterns:

    def test_turnip_placeholder_accepts_quoted_text_or_word(self):
        definition = Given("the store operates in :countryName", handler)
        assert definition.match('the store operates in "United Kingdom"') == [
            Argument("countryName", "United Kingdom")
        ]
        assert definition.match("the store operates in France") == [Argument("countryName", "France")]
        assert definition.match("the store operates in United Kingdom") is None

    def test_turnip_optional_text(self):
        definition = Then("I should see :count countr(y)(ies) in the list", handler)
        assert definition.match("I should see 1 country in the list") is not None
        assert definition.match("I should see 2 countries in the list") is not None

    def test_repeated_placeholders_get_distinct_names(self):
        regex, sample = compile_turnip("from :country to :country")
        assert set(regex.groupindex) == {"country", "country_2"}
        assert sample == 'from "sample" to "sample"'

    def test_regex_pattern_positional_groups(self):
        definition = When(r'/^I add the "([^"]+)" province with "([^"]+)" code$/', handler)
        assert definition.match('I add the "Bretagne" province with "FR-BRE" code') == [
            Argument(None, "Bretagne"),
            Argument(None, "FR-BRE"),
        ]

    def test_keyword_is_informational(self):
        assert (Given.keyword, When.keyword, Then.keyword) == ("Given", "When", "Then")


@allure.epic("Step Dispatch")
@allure.feature("Registry")
class TestRegistry:

    @pytest.mark.P0
    def test_match_is_keyword_agnostic_and_returns_arguments(self):
        registry = StepRegistry()
        registry.add(Given("I choose :countryName", handler))

        step_match = registry.match('I choose "France"')
        assert step_match.definition.handler is handler
        assert step_match.arguments == [Argument("countryName", "France")]

    @pytest.mark.P0
    def test_undefined_step(self):
        registry = StepRegistry()
        registry.add(When("I add it", handler))
        with pytest.raises(UndefinedStepError, match="I delete it") as error:
            registry.match("I delete it")
        assert error.value.text == "I delete it"

    @pytest.mark.P0
    def test_identical_pattern_is_rejected(self):
        registry = StepRegistry()
        registry.add(When("I add it", handler))
        with pytest.raises(AmbiguousStepError, match="already defined"):
            registry.add(Then("I add it", other_handler))

    def test_turnip_overlap_is_rejected(self):
        registry = StepRegistry()
        registry.add(When("I choose :countryName", handler))
        with pytest.raises(AmbiguousStepError, match="overlaps"):
            registry.add(When("I choose :currencyCode", other_handler))

    def test_regex_overlap_detected_through_examples(self):
        registry = StepRegistry()
        registry.add(When("I delete the :provinceName province", handler))
        with pytest.raises(AmbiguousStepError, match="overlaps"):
            registry.add(When(
                r'/^I delete the "([^"]+)" province$/',
                other_handler,
                examples=['I delete the "Normandie" province'],
            ))

    def test_existing_regex_examples_catch_new_turnip(self):
        registry = StepRegistry()
        registry.add(When(r"/^I (enable|disable) it$/", handler, examples=["I enable it"]))
        with pytest.raises(AmbiguousStepError):
            registry.add(When("I :action it", other_handler))

    def test_distinct_steps_coexist_and_first_registered_wins(self):
        registry = StepRegistry()
        registry.add(Then("I should be logged in", handler))
        registry.add(Then("I should be logged in as :fullName", other_handler))
        registry.add(Then(r"/^I should be logged in (?:today|now)$/", handler))

        assert len(registry) == 3
        assert registry.match("I should be logged in").definition.handler is handler
        assert registry.match('I should be logged in as "Ted Bear"').definition.handler is other_handler

    def test_rejects_unknown_values(self):
        with pytest.raises(TypeError):
            StepRegistry().add("I add it")


@allure.epic("Step Dispatch")
@allure.feature("Transformations")
class TestTransformations:

    def test_placeholder_transformation_applies_by_name(self):
        transformation = Transformation(":country", handler)
        assert transformation.applies_to(Argument("country", "France")) == ("France",)
        assert transformation.applies_to(Argument("country_2", "Poland")) == ("Poland",)
        assert transformation.applies_to(Argument("countryName", "France")) is None
        assert transformation.applies_to(Argument(None, "France")) is None

    def test_regex_transformation_receives_groups(self):
        transformation = Transformation(r'/^country "([^"]+)"$/', handler)
        assert transformation.applies_to(Argument(None, 'country "France"')) == ("France",)
        assert transformation.applies_to(Argument(None, "France")) is None

        whole = Transformation(r"/^(?:it|its)$/", handler)
        assert whole.applies_to(Argument(None, "it")) == ("it",)

    def test_registry_returns_first_applicable_transformation(self):
        registry = StepRegistry()
        by_name = Transformation(":country", handler)
        by_text = Transformation(r"/^(?:this|that|the) ([^\"]+)$/", other_handler)
        registry.add(by_name)
        registry.add(by_text)

        assert registry.find_transformation(Argument("country", "France")) == (by_name, ("France",))
        assert registry.find_transformation(Argument(None, "this country")) == (by_text, ("country",))
        assert registry.find_transformation(Argument(None, "Bretagne")) is None

    def test_duplicate_transformation_is_rejected(self):
        registry = StepRegistry()
        registry.add(Transformation(":country", handler))
        with pytest.raises(AmbiguousStepError):
            registry.add(Transformation(":country", other_handler))

    def test_invalid_transformation_pattern(self):
        with pytest.raises(ValueError):
            Transformation("country", handler)
