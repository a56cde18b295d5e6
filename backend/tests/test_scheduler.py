import asyncio
import pytest
from logit.scheduler import GenerationTracker, KeyedDebouncer

def test_generations_last_issue_wins_per_slot():
    gens = GenerationTracker()
    first = gens.issue("exercise-1")
    second = gens.issue("exercise-1")
    other = gens.issue("exercise-2")
    assert second > first
    assert not gens.is_current("exercise-1", first)
    assert gens.is_current("exercise-1", second)
    assert gens.is_current("exercise-2", other)
    gens.forget("exercise-1")
    assert not gens.is_current("exercise-1", second)

@pytest.mark.asyncio
async def test_debouncer_replaces_pending_timer():
    fired = []
    debouncer = KeyedDebouncer(0.02)
    debouncer.schedule("a", lambda: fired.append(1))
    debouncer.schedule("a", lambda: fired.append(2))
    debouncer.schedule("b", lambda: fired.append(3))
    await debouncer.wait_idle()
    assert sorted(fired) == [2, 3]

@pytest.mark.asyncio
async def test_debouncer_awaits_coroutine_callbacks_and_cancel_all():
    done = []

    async def work():
        await asyncio.sleep(0)
        done.append("ran")

    debouncer = KeyedDebouncer(0)
    debouncer.schedule("a", work)
    await debouncer.wait_idle()
    assert done == ["ran"]

    debouncer = KeyedDebouncer(10)
    debouncer.schedule("a", work)
    debouncer.schedule("b", work)
    debouncer.cancel_all()
    assert not debouncer.is_pending("a") and not debouncer.is_pending("b")
    await debouncer.wait_idle()
    assert done == ["ran"]
