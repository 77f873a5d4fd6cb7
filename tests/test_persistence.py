import json
from pathlib import Path

from routegrid.persistence.filesystem import JsonFileStore, MemoryStore


def test_json_file_store_creates_parent_directory_on_save(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "state.json"
    store = JsonFileStore(path)

    assert store.load("mode") is None
    assert not path.exists()

    store.save("mode", "many-to-many")

    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8")) == {"mode": "many-to-many"}


def test_json_file_store_round_trips_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    JsonFileStore(path).save("origins", [{"id": "a", "address": "Here"}])
    JsonFileStore(path).save("mode", "one-to-many")

    reloaded = JsonFileStore(path)

    assert reloaded.load("origins") == [{"id": "a", "address": "Here"}]
    assert reloaded.load("mode") == "one-to-many"


def test_json_file_store_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")

    store = JsonFileStore(path)

    assert store.load("origins") is None


def test_memory_store_keeps_json_shaped_copies() -> None:
    value = {"center": (1.0, 2.0), "zoom": 3}
    store = MemoryStore()

    store.save("map_view", value)
    value["zoom"] = 10

    assert store.load("map_view") == {"center": [1.0, 2.0], "zoom": 3}
