# logit/editor.py
"""
State behind the new-workout form.

One ``WorkoutEditor`` per editing session owns everything the form needs
between keystrokes: exercise rows, per-row suggestion and comparison state,
the lookup caches, debounce timers and request generations. Nothing here is
module level, so two editors never share a cache.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol

from logit.drafts import DraftAutosaver
from logit.errors import LogitError, WorkoutValidationError
from logit.insights import Comparison, compare_draft
from logit.naming import collapse_whitespace, normalize_key, to_display_name
from logit.scheduler import GenerationTracker, KeyedDebouncer
from logit.schemas.draft import (
    DRAFT_DEFAULT_TITLE,
    DraftExercise,
    DraftSet,
    DraftSnapshot,
    local_datetime_value,
    parse_local_datetime,
    sanitize_reps,
    sanitize_weight,
)
from logit.schemas.insight import InsightRead
from logit.schemas.workout import parse_positive_int
from logit.settings import get_settings
from logit.suggestions import inline_hint, rank_suggestions

log = logging.getLogger("uvicorn")


class WorkoutLookup(Protocol):
    async def fetch_suggestions(self, query: str) -> list[str]: ...
    async def fetch_insight(self, exercise: str) -> InsightRead: ...
    async def create_workout(self, payload: dict[str, Any]) -> int: ...


class InsightStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(slots=True)
class InsightState:
    status: InsightStatus = InsightStatus.IDLE
    lookup_key: Optional[str] = None
    data: Optional[InsightRead] = None
    error: Optional[str] = None


@dataclass(slots=True)
class SetDraft:
    id: str
    reps: str = ""
    weight_lb: str = ""


@dataclass(slots=True)
class ExerciseDraft:
    id: str
    name: str = ""
    sets: list[SetDraft] = field(default_factory=list)


class WorkoutEditor:
    def __init__(
        self,
        lookup: WorkoutLookup,
        autosaver: Optional[DraftAutosaver] = None,
        *,
        suggestion_delay: Optional[float] = None,
    ):
        settings = get_settings()
        delay = settings.SUGGESTION_DEBOUNCE_MS / 1000 if suggestion_delay is None else suggestion_delay

        self.lookup = lookup
        self.autosaver = autosaver
        self.title = DRAFT_DEFAULT_TITLE
        self.performed_at = local_datetime_value(parse_local_datetime(None))
        self.exercises: list[ExerciseDraft] = []
        self.suggestions: dict[str, str] = {}
        self.insights: dict[str, InsightState] = {}
        self.restored = False
        self.saving = False
        self.form_error: Optional[str] = None

        self._counters = {"exercise": 0, "set": 0}
        self._suggestion_cache: dict[str, list[str]] = {}
        self._insight_cache: dict[str, InsightRead] = {}
        self._suggestion_generations = GenerationTracker()
        self._insight_generations = GenerationTracker()
        self._debouncer = KeyedDebouncer(delay)
        self._tasks: set[asyncio.Task] = set()

        self.exercises.append(self._new_exercise())

    # --- rows ---

    def _next_id(self, kind: str) -> str:
        self._counters[kind] += 1
        return f"{kind}-{self._counters[kind]}"

    def _new_exercise(self, name: str = "", sets: Optional[list[SetDraft]] = None) -> ExerciseDraft:
        return ExerciseDraft(id=self._next_id("exercise"), name=name, sets=sets or [SetDraft(self._next_id("set"))])

    def exercise(self, slot: str) -> ExerciseDraft:
        for entry in self.exercises:
            if entry.id == slot:
                return entry
        raise KeyError(slot)

    def add_exercise(self) -> ExerciseDraft:
        entry = self._new_exercise()
        self.exercises.append(entry)
        self._changed()
        return entry

    def remove_exercise(self, slot: str) -> None:
        if len(self.exercises) == 1:
            return
        self.exercises = [e for e in self.exercises if e.id != slot]
        self.suggestions.pop(slot, None)
        self.insights.pop(slot, None)
        self._debouncer.cancel(slot)
        self._suggestion_generations.forget(slot)
        self._insight_generations.forget(slot)
        self._changed()

    def add_set(self, slot: str) -> SetDraft:
        entry = SetDraft(self._next_id("set"))
        self.exercise(slot).sets.append(entry)
        self._changed()
        return entry

    def remove_set(self, slot: str, set_id: str) -> None:
        exercise = self.exercise(slot)
        if len(exercise.sets) == 1:
            return
        exercise.sets = [s for s in exercise.sets if s.id != set_id]
        self._changed()

    def update_set(self, slot: str, set_id: str, *, reps: Optional[str] = None, weight_lb: Optional[str] = None) -> None:
        for entry in self.exercise(slot).sets:
            if entry.id == set_id:
                if reps is not None:
                    entry.reps = sanitize_reps(reps)
                if weight_lb is not None:
                    entry.weight_lb = sanitize_weight(weight_lb)
                self._changed()
                return
        raise KeyError(set_id)

    def set_title(self, title: str) -> None:
        self.title = title
        self._changed()

    def set_performed_at(self, value: str) -> None:
        self.performed_at = value
        self._changed()

    # --- drafts ---

    def snapshot(self) -> DraftSnapshot:
        return DraftSnapshot(
            title=self.title,
            performed_at=self.performed_at,
            exercises=[
                DraftExercise(
                    name=e.name,
                    sets=[DraftSet(reps=s.reps, weight_lb=s.weight_lb) for s in e.sets],
                )
                for e in self.exercises
            ],
        )

    def restore(self) -> bool:
        """Hydrate the form from the stored draft, if there is a readable one."""
        if self.autosaver is None:
            return False
        stored = self.autosaver.restore()
        if stored is None:
            return False
        self._counters = {"exercise": 0, "set": 0}
        self.title = stored.title
        self.performed_at = stored.performed_at
        self.exercises = [
            self._new_exercise(
                name=e.name,
                sets=[SetDraft(self._next_id("set"), reps=s.reps, weight_lb=s.weight_lb) for s in e.sets],
            )
            for e in stored.exercises
        ]
        self.restored = True
        return True

    def _changed(self) -> None:
        if self.autosaver is not None:
            self.autosaver.schedule(self.snapshot())

    def page_hide(self) -> Optional[str]:
        if self.autosaver is None:
            return None
        self.autosaver.schedule(self.snapshot())
        return self.autosaver.flush()

    # --- suggestions ---

    def change_name(self, slot: str, raw: str) -> None:
        """Name typed: comparison goes stale, suggestion lookup is debounced."""
        self.exercise(slot).name = raw
        state = self.insights.get(slot)
        if state is not None and state.status is not InsightStatus.IDLE:
            self.insights[slot] = InsightState()
        # lookups still in flight were for the previous text
        self._insight_generations.forget(slot)
        self._suggestion_generations.forget(slot)
        self._changed()

        self._debouncer.cancel(slot)
        if not raw.strip():
            self.suggestions.pop(slot, None)
            return
        self._debouncer.schedule(slot, lambda: self.request_suggestions(slot, raw))

    def request_suggestions(self, slot: str, query: str) -> Optional[asyncio.Task]:
        """Issue a lookup now; only the most recent one per slot gets applied."""
        key = normalize_key(query)
        if not key:
            self.suggestions.pop(slot, None)
            self._suggestion_generations.forget(slot)
            return None

        generation = self._suggestion_generations.issue(slot)
        cached = self._suggestion_cache.get(key)
        if cached is not None:
            self._apply_suggestion(slot, rank_suggestions(query, cached))
            return None
        return self._spawn(self._load_suggestions(slot, query, key, generation))

    async def _load_suggestions(self, slot: str, query: str, key: str, generation: int) -> None:
        try:
            raw = await self.lookup.fetch_suggestions(query)
        except LogitError as exc:
            log.debug("suggestion lookup for %r failed: %s", query, exc.message)
            if self._suggestion_generations.is_current(slot, generation):
                self.suggestions.pop(slot, None)
            return

        names = [n for n in (collapse_whitespace(item) for item in raw) if n]
        self._suggestion_cache[key] = names
        if self._suggestion_generations.is_current(slot, generation):
            self._apply_suggestion(slot, rank_suggestions(query, names))

    def _apply_suggestion(self, slot: str, suggestion: Optional[str]) -> None:
        if suggestion:
            self.suggestions[slot] = suggestion
        else:
            self.suggestions.pop(slot, None)

    def hint(self, slot: str) -> Optional[str]:
        return inline_hint(self.exercise(slot).name, self.suggestions.get(slot))

    def accept_suggestion(self, slot: str, suggestion: str) -> Optional[asyncio.Task]:
        """Tab / right-arrow: take the suggestion and look up its history."""
        return self._settle_name(slot, suggestion)

    def commit_name(self, slot: str) -> Optional[asyncio.Task]:
        """Blur: tidy the typed name and look up its history."""
        return self._settle_name(slot, self.exercise(slot).name)

    def _settle_name(self, slot: str, raw: str) -> Optional[asyncio.Task]:
        self._debouncer.cancel(slot)
        self.suggestions.pop(slot, None)
        self._suggestion_generations.forget(slot)
        name = to_display_name(raw)
        self.exercise(slot).name = name
        self._changed()
        return self.request_insight(slot, name)

    # --- comparison ---

    def request_insight(self, slot: str, exercise_name: str) -> Optional[asyncio.Task]:
        key = normalize_key(exercise_name)
        if not key:
            self.insights[slot] = InsightState()
            self._insight_generations.forget(slot)
            return None

        generation = self._insight_generations.issue(slot)
        cached = self._insight_cache.get(key)
        if cached is not None:
            self.insights[slot] = InsightState(InsightStatus.READY, lookup_key=key, data=cached)
            return None

        self.insights[slot] = InsightState(InsightStatus.LOADING, lookup_key=key)
        return self._spawn(self._load_insight(slot, exercise_name, key, generation))

    async def _load_insight(self, slot: str, exercise_name: str, key: str, generation: int) -> None:
        try:
            insight = await self.lookup.fetch_insight(exercise_name)
        except LogitError as exc:
            log.debug("insight lookup for %r failed: %s", exercise_name, exc.message)
            if self._insight_generations.is_current(slot, generation):
                self.insights[slot] = InsightState(InsightStatus.ERROR, lookup_key=key, error=exc.message)
            return

        self._insight_cache[normalize_key(insight.normalized_name)] = insight
        if self._insight_generations.is_current(slot, generation):
            self.insights[slot] = InsightState(InsightStatus.READY, lookup_key=key, data=insight)

    def comparison(self, slot: str) -> Optional[Comparison]:
        """Live draft-vs-history numbers; None until the baseline has loaded."""
        state = self.insights.get(slot)
        if state is None or state.status is not InsightStatus.READY:
            return None
        return compare_draft(self.exercise(slot).sets, state.data)

    # --- submit ---

    def build_payload(self) -> dict[str, Any]:
        exercises = []
        for entry in self.exercises:
            name = to_display_name(entry.name)
            if not name:
                continue
            sets = []
            for s in entry.sets:
                reps = parse_positive_int(s.reps)
                if reps is None:
                    continue
                weight = s.weight_lb.strip()
                if weight.startswith("."):
                    weight = "0" + weight
                sets.append({"reps": reps, "weightLb": weight or None})
            exercises.append({"name": name, "sets": sets})

        if not exercises:
            raise WorkoutValidationError("Add at least one exercise with a name.")
        for entry in exercises:
            if not entry["sets"]:
                raise WorkoutValidationError(f"Add at least one set with reps for {entry['name']}.")

        return {"title": self.title, "performedAt": self.performed_at, "exercises": exercises}

    async def submit(self) -> Optional[int]:
        """Send the workout. Returns its id, or None with ``form_error`` set."""
        if self.saving:
            return None
        self.form_error = None
        try:
            payload = self.build_payload()
        except WorkoutValidationError as exc:
            self.form_error = exc.message
            return None

        self.saving = True
        try:
            workout_id = await self.lookup.create_workout(payload)
        except LogitError as exc:
            self.form_error = exc.message
            return None
        finally:
            self.saving = False

        if self.autosaver is not None:
            self.autosaver.clear()
        return workout_id

    # --- lifecycle ---

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Let pending timers fire and in-flight lookups land."""
        await self._debouncer.wait_idle()
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self.autosaver is not None:
            await self.autosaver.wait_idle()

    def close(self) -> None:
        self._debouncer.cancel_all()
        if self.autosaver is not None:
            self.autosaver.close()
