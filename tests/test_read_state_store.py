import json

import pytest

from core.errors import ErrorKind
from core.read_state_store import READ_STATE_KEY, LocalStorage, MemoryStorage, ReadStateStore


def test_load_absent_value_is_empty(store):
    assert store.load() == set()
    assert store.last_error is None


@pytest.mark.parametrize("raw", ["not json", json.dumps({"a": 1}), json.dumps(["a", 2]), json.dumps("a")])
def test_load_corrupt_value_is_empty_and_reported(raw):
    store = ReadStateStore(MemoryStorage({READ_STATE_KEY: raw}))

    assert store.load() == set()
    assert store.last_error.kind is ErrorKind.STORAGE_CORRUPT


def test_corrupt_value_is_overwritten_on_next_add():
    storage = MemoryStorage({READ_STATE_KEY: "{{{"})
    store = ReadStateStore(storage)
    store.add("a")

    assert json.loads(storage.get_item(READ_STATE_KEY)) == ["a"]


def test_add_persists_immediately(store, storage):
    assert store.add("a") is True

    assert store.contains("a")
    assert json.loads(storage.get_item(READ_STATE_KEY)) == ["a"]


def test_add_existing_id_does_not_write(store, storage):
    store.add("a")
    assert store.add("a") is False
    assert storage.write_count == 1


def test_add_all_uses_a_single_write(store, storage):
    assert store.add_all(["a", "b", "c"]) is True

    assert storage.write_count == 1
    assert store.ids() == {"a", "b", "c"}


def test_add_all_with_nothing_new_skips_write(store, storage):
    store.add_all(["a", "b"])
    assert store.add_all(["b", "a"]) is False
    assert store.add_all([]) is False
    assert storage.write_count == 1


def test_save_overwrites_persisted_set(store, storage):
    store.add_all(["a", "b"])
    store.save(["z"])

    assert store.ids() == {"z"}
    assert json.loads(storage.get_item(READ_STATE_KEY)) == ["z"]


def test_read_state_survives_restart(tmp_path):
    path = tmp_path / "state" / "storage.json"
    ReadStateStore(LocalStorage(path)).add_all(["x", "y"])

    reloaded = ReadStateStore(LocalStorage(path))
    assert reloaded.load() == {"x", "y"}


def test_local_storage_keeps_other_keys(tmp_path):
    path = tmp_path / "storage.json"
    storage = LocalStorage(path)
    storage.set_item("token", "abc")
    storage.set_item(READ_STATE_KEY, "[]")

    assert LocalStorage(path).get_item("token") == "abc"
    assert json.loads(path.read_text(encoding="utf-8")) == {"token": "abc", READ_STATE_KEY: "[]"}


def test_local_storage_leaves_no_temporary_files(tmp_path):
    storage = LocalStorage(tmp_path / "storage.json")
    for index in range(3):
        storage.set_item(READ_STATE_KEY, json.dumps([str(index)]))

    assert [entry.name for entry in tmp_path.iterdir()] == ["storage.json"]


def test_local_storage_with_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")

    assert LocalStorage(path).get_item(READ_STATE_KEY) is None
    assert ReadStateStore(LocalStorage(path)).load() == set()


def test_local_storage_ignores_non_string_values(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({READ_STATE_KEY: ["a"]}), encoding="utf-8")

    assert LocalStorage(path).get_item(READ_STATE_KEY) is None
