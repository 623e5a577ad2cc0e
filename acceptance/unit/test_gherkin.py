import pytest

from acceptance.framework.gherkin import GherkinSyntaxError, ScenarioOutline, parse_feature
from acceptance.framework.tags import TagFilter


FEATURE = '''
@managing_countries
Feature: Managing provinces
    In order to ship goods to specific regions

    Background:
        Given I am logged in as an administrator
        And the store operates in "France"

    @ui @domain
    Scenario: Adding a province
        When I want to edit this country
        And I add the "Bretagne" province with "FR-BRE" code
        But I save my changes
        Then the country "France" should have the "Bretagne" province

    @ui
    Scenario Outline: Browsing
        Given the store operates in "<first>"
        When I browse countries
        Then I should see the country "<first>" in the list

        Examples:
            | first   |
            | Germany |
            | Ireland |

    Scenario: Importing
        Given the following countries:
            | code | name   |
            | FR   | France |
        And the import note:
            """
            Imported by the nightly job.
              Keep indentation.
            """
'''


def test_feature_structure():
    feature = parse_feature(FEATURE, "provinces.feature")

    assert feature.name == "Managing provinces"
    assert feature.tags == ["managing_countries"]
    assert feature.description == "In order to ship goods to specific regions"
    assert [step.text for step in feature.background.steps] == [
        "I am logged in as an administrator",
        'the store operates in "France"',
    ]
    assert isinstance(feature.scenarios[1], ScenarioOutline)


def test_conjunctions_inherit_previous_keyword():
    scenario = parse_feature(FEATURE).scenarios[0]
    assert [step.keyword for step in scenario.steps] == ["When", "When", "When", "Then"]
    assert scenario.tags == ["managing_countries", "ui", "domain"]


def test_outline_expands_examples():
    scenarios = list(parse_feature(FEATURE).iter_scenarios())
    browsing = [s for s in scenarios if s.name.startswith("Browsing")]

    assert [s.name for s in browsing] == ["Browsing #1", "Browsing #2"]
    assert browsing[1].steps[0].text == 'the store operates in "Ireland"'
    assert browsing[0].steps[2].text == 'I should see the country "Germany" in the list'
    assert browsing[0].tags == ["managing_countries", "ui"]


def test_tables_and_doc_strings():
    importing = parse_feature(FEATURE).scenarios[2]
    assert importing.steps[0].table == [["code", "name"], ["FR", "France"]]
    assert importing.steps[1].doc_string == "Imported by the nightly job.\n  Keep indentation."


@pytest.mark.parametrize(
    "text, message",
    [
        ("Scenario: no feature", "got 'Scenario: no feature'"),
        ("Feature: x\n  Scenario: y\n    Given a\n    Frobnicate", "got 'Frobnicate'"),
        ("Feature: x\n  Scenario: y\n    Given a\n    \"\"\"\n    open", "unexpected end of file"),
        ("Feature: x\n  Scenario: y\n    Given a\n      | a | b |\n      | c |", "inconsistent cell count"),
    ],
)
def test_syntax_errors_report_location(text, message):
    with pytest.raises(GherkinSyntaxError, match=message) as error:
        parse_feature(text, "broken.feature")
    assert str(error.value).startswith("broken.feature")


def test_syntax_error_carries_line():
    with pytest.raises(GherkinSyntaxError) as error:
        parse_feature("Feature: x\n  Scenario: y\n    Given a\n    Frobnicate", "broken.feature")
    assert error.value.line == 4
    assert str(error.value).startswith("broken.feature:4: ")


def test_text_without_feature():
    with pytest.raises(GherkinSyntaxError, match="No 'Feature:' found"):
        parse_feature("# only a comment\n")


def test_descriptions_are_allowed_everywhere():
    feature = parse_feature('''
        Feature: F
            Background: Shared setup
                Runs before every scenario.
                Given the store operates in "France"

            Scenario: S
                Some free-form description of the scenario.
                Given a step
    ''')

    scenario = feature.scenarios[0]
    assert scenario.description == "Some free-form description of the scenario."
    assert [step.text for step in scenario.steps] == ["a step"]
    assert feature.background.description == "Runs before every scenario."


def test_rules_carry_tags_and_background():
    feature = parse_feature('''
        @managing_countries
        Feature: Country rules
            Background:
                Given the store operates in "France"

            @domain
            Rule: Disabled countries stay listed
                Background:
                    Given the store has disabled country "Germany"

                Scenario: Listing
                    When I browse countries

            Rule: No background here
                Scenario: Plain
                    When I browse countries
    ''')

    listing, plain = feature.scenarios
    assert listing.rule == "Disabled countries stay listed"
    assert listing.tags == ["managing_countries", "domain"]
    assert [step.text for step in listing.background.steps] == ['the store has disabled country "Germany"']
    assert plain.background is None
    assert plain.tags == ["managing_countries"]
    assert [step.text for step in feature.background.steps] == ['the store operates in "France"']


def test_leading_conjunction_keeps_its_keyword():
    scenario = parse_feature("Feature: x\n  Scenario: y\n    And I add it\n    Then it exists").scenarios[0]
    assert [step.keyword for step in scenario.steps] == ["And", "Then"]


def test_localized_keywords_are_normalized():
    feature = parse_feature(
        "# language: fr\n"
        "Fonctionnalité: Pays\n"
        "  Scénario: Ajout\n"
        "    Soit le magasin\n"
        "    Et un pays\n"
        "    Quand j'ajoute un pays\n"
        "    Alors il existe\n"
    )
    assert feature.language == "fr"
    assert [step.keyword for step in feature.scenarios[0].steps] == ["Given", "Given", "When", "Then"]


@pytest.mark.parametrize(
    "expression, tags, expected",
    [
        ("", ["anything"], True),
        ("@managing_countries && @ui", ["managing_countries", "ui"], True),
        ("@managing_countries && @ui", ["managing_countries", "domain"], False),
        ("@ui || @domain", ["domain"], True),
        ("@ui,@domain", ["api"], False),
        ("~@todo", ["ui"], True),
        ("@ui && ~@todo", ["ui", "todo"], False),
        ("managing_countries", ["@managing_countries"], True),
    ],
)
def test_tag_filter(expression, tags, expected):
    assert TagFilter(expression).matches(tags) is expected


def test_tag_filter_rejects_empty_terms():
    assert not TagFilter("")
    with pytest.raises(ValueError):
        TagFilter("@ui && ")


@pytest.mark.parametrize("expression", ["(@a || @b) && @c", "@ui && (@todo)", "@ui @domain"])
def test_tag_filter_rejects_grouping_and_stray_text(expression):
    with pytest.raises(ValueError, match="Invalid tag"):
        TagFilter(expression)
