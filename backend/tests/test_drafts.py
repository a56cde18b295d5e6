import asyncio
import json
import pytest
from logit.drafts import DraftAutosaver, JsonFileStore, MemoryStore
from logit.schemas.draft import DraftSnapshot, sanitize_reps, sanitize_weight

KEY = "workout-draft-v1"

class CountingStore(MemoryStore):
    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = []

    def set(self, key, value):
        self.writes.append(value)
        super().set(key, value)

class FullStore(MemoryStore):
    def set(self, key, value):
        raise OSError("quota exceeded")

def snap(title, reps="5"):
    return DraftSnapshot(title=title, performed_at="2026-03-10T18:30",
                         exercises=[{"name": "Bench", "sets": [{"reps": reps, "weightLb": "100"}]}])

def test_sanitizers():
    assert sanitize_reps("1a2 ") == "12"
    assert sanitize_weight("1,2.5kg") == "1.25"
    assert sanitize_weight("..5") == ".5"
    assert sanitize_weight(None) == ""

def test_snapshot_tolerates_messy_input():
    s = DraftSnapshot.model_validate({
        "title": 7,
        "performedAt": "yesterday",
        "exercises": ["junk", {"name": None, "sets": [1, {"reps": "1x0", "weightLb": "2,5"}]}],
    })
    assert s.title == "Gym session"
    assert len(s.performed_at) == len("2026-03-10T18:30")
    assert s.exercises[0].name == ""
    assert s.exercises[0].sets[0].reps == "10"
    assert s.exercises[0].sets[0].weight_lb == "2.5"
    empty = DraftSnapshot.model_validate({})
    assert len(empty.exercises) == 1 and len(empty.exercises[0].sets) == 1

@pytest.mark.asyncio
async def test_stored_json_uses_camel_case():
    store = MemoryStore()
    saver = DraftAutosaver(store, key=KEY, delay=0.01)
    saver.restore()
    saver.schedule(snap("A"))
    saved_at = saver.flush()
    body = json.loads(store.get(KEY))
    assert body["savedAt"] == saved_at
    assert body["performedAt"] == "2026-03-10T18:30"
    assert body["exercises"][0]["sets"][0] == {"reps": "5", "weightLb": "100"}

@pytest.mark.asyncio
async def test_rapid_edits_coalesce_into_one_write():
    store = CountingStore()
    saver = DraftAutosaver(store, key=KEY, delay=0.05)
    saver.restore()
    for title in ("A", "AB", "ABC"):
        saver.schedule(snap(title))
        await asyncio.sleep(0.01)
    assert store.writes == []
    await saver.wait_idle()
    assert len(store.writes) == 1
    assert json.loads(store.writes[0])["title"] == "ABC"

@pytest.mark.asyncio
async def test_page_hide_flushes_mid_debounce():
    store = CountingStore()
    saver = DraftAutosaver(store, key=KEY, delay=10)
    saver.restore()
    saver.schedule(snap("Latest"))
    assert saver.pending
    assert saver.flush() is not None
    assert not saver.pending
    assert [json.loads(w)["title"] for w in store.writes] == ["Latest"]

def test_restore_roundtrip_and_unreadable_discard():
    store = MemoryStore({KEY: snap("Saved").model_copy(update={"saved_at": "2026-03-10T18:31:00+00:00"}).model_dump_json(by_alias=True)})
    saver = DraftAutosaver(store, key=KEY)
    restored = saver.restore()
    assert restored.title == "Saved"
    assert saver.last_saved_at == "2026-03-10T18:31:00+00:00"

    broken = MemoryStore({KEY: "{not json"})
    assert DraftAutosaver(broken, key=KEY).restore() is None
    assert broken.get(KEY) is None

    wrong_shape = MemoryStore({KEY: "[1, 2]"})
    assert DraftAutosaver(wrong_shape, key=KEY).restore() is None
    assert wrong_shape.get(KEY) is None

def test_writes_wait_until_restore_ran():
    store = CountingStore()
    saver = DraftAutosaver(store, key=KEY)
    saver.schedule(snap("early"))
    assert saver.flush() is None
    assert store.writes == []

@pytest.mark.asyncio
async def test_write_failures_are_swallowed():
    saver = DraftAutosaver(FullStore(), key=KEY)
    saver.restore()
    saver.schedule(snap("A"))
    assert saver.flush() is None

@pytest.mark.asyncio
async def test_clear_removes_draft():
    store = MemoryStore()
    saver = DraftAutosaver(store, key=KEY)
    saver.restore()
    saver.schedule(snap("A"))
    saver.flush()
    saver.clear()
    assert store.get(KEY) is None
    assert saver.flush() is None

def test_json_file_store(tmp_path):
    path = tmp_path / "drafts" / "store.json"
    store = JsonFileStore(path)
    assert store.get(KEY) is None
    store.set(KEY, "one")
    store.set("other", "two")
    assert JsonFileStore(path).get(KEY) == "one"
    store.remove(KEY)
    assert store.get(KEY) is None
    assert store.get("other") == "two"
    path.write_text("garbage")
    assert store.get("other") is None
