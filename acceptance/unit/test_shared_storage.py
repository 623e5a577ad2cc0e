import pytest

from acceptance.framework.shared_storage import KeyNotFoundError, SharedStorage


def test_set_get_and_has():
    storage = SharedStorage()
    france = object()
    storage.set("country", france)

    assert storage.get("country") is france
    assert storage.has("country")
    assert not storage.has("province")
    assert "country" in storage


def test_missing_key_raises_key_not_found():
    storage = SharedStorage()
    with pytest.raises(KeyNotFoundError) as error:
        storage.get("country")
    assert 'key "country"' in str(error.value)
    assert isinstance(error.value, KeyError)


def test_latest_resource_follows_last_write():
    storage = SharedStorage()
    storage.set("country", "FR")
    storage.set("province", "FR-BRE")
    assert storage.get_latest_resource() == "FR-BRE"

    storage.set("country", "DE")
    assert storage.get_latest_resource() == "DE"


def test_latest_resource_on_empty_storage():
    with pytest.raises(KeyNotFoundError):
        SharedStorage().get_latest_resource()


def test_clipboard_replaces_content():
    storage = SharedStorage()
    storage.set("country", "FR")
    storage.set_clipboard({"administrator": "ted", "channel": "web"})

    assert not storage.has("country")
    assert storage.get("administrator") == "ted"
    assert storage.get_latest_resource() == "web"

    storage.clear()
    assert len(storage) == 0
