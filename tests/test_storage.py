"""
Tests for the key-value backends.
"""

import json
import threading

import pytest

from core.errors import StorageError
from core.preset_store import PresetStore
from core.storage import InMemoryBackend, JsonFileBackend
from conftest import make_preset


async def test_in_memory_backend():
    backend = InMemoryBackend({"a": "1"})
    assert await backend.get("a") == "1"

    await backend.set("b", "2")
    await backend.remove("a")
    await backend.remove("never-set")

    assert await backend.get("a") is None
    assert await backend.get("b") == "2"


async def test_json_file_backend_missing_file(tmp_path):
    backend = JsonFileBackend(tmp_path / "nested" / "storage.json")
    assert await backend.get("anything") is None


async def test_json_file_backend_persists(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    backend = JsonFileBackend(path)
    await backend.set("key", "value")

    assert json.loads(path.read_text(encoding="utf-8")) == {"key": "value"}
    assert await JsonFileBackend(path).get("key") == "value"

    await backend.remove("key")
    assert await backend.get("key") is None


async def test_json_file_backend_corrupt_file(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{oops", encoding="utf-8")

    with pytest.raises(StorageError):
        await JsonFileBackend(path).get("key")


async def test_json_file_backend_requires_object(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(StorageError):
        await JsonFileBackend(path).get("key")


async def test_preset_store_over_file_backend(tmp_path):
    path = tmp_path / "storage.json"
    await PresetStore(JsonFileBackend(path)).upsert(make_preset("p1", name="On disk"))

    reopened = PresetStore(JsonFileBackend(path))
    assert (await reopened.get("p1")).name == "On disk"


async def test_json_file_backend_does_file_io_off_the_event_loop(tmp_path, monkeypatch):
    backend = JsonFileBackend(tmp_path / "storage.json")
    threads = []
    load, save = backend._load, backend._save

    def recording_load():
        threads.append(threading.current_thread())
        return load()

    def recording_save(data):
        threads.append(threading.current_thread())
        save(data)

    monkeypatch.setattr(backend, "_load", recording_load)
    monkeypatch.setattr(backend, "_save", recording_save)

    await backend.set("key", "value")
    assert await backend.get("key") == "value"
    await backend.remove("key")

    assert len(threads) == 5
    assert threading.main_thread() not in threads
