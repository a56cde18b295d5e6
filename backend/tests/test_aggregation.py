from datetime import datetime, timedelta, timezone
from logit.aggregation import (
    ExerciseRecord,
    SetRecord,
    aggregate_sessions,
    all_time_best_weight,
    display_volume,
    exercise_detail,
    fold_sets,
    round_half_up,
    safe_average,
    summarize_exercises,
)

T0 = datetime(2026, 3, 2, 18, 0, tzinfo=timezone.utc)

def rec(session_id, sets, name="Bench Press", when=T0, title="Push"):
    return ExerciseRecord(
        session_id=session_id,
        session_title=title,
        performed_at=when,
        name=name,
        sets=[SetRecord(reps=r, weight=w) for r, w in sets],
    )

def test_two_sessions_same_exercise():
    records = [rec(1, [(5, 100.0)]), rec(2, [(3, 120.0)], when=T0 + timedelta(days=3))]
    sessions = aggregate_sessions(records)
    assert [s.session_id for s in sessions] == [2, 1]
    assert all_time_best_weight(sessions) == 120.0
    assert sum(s.total_volume for s in sessions) == 860
    assert len(sessions) == 2

def test_best_weight_reps_prefers_more_reps_at_same_weight():
    agg = fold_sets([SetRecord(3, 100.0), SetRecord(6, 100.0), SetRecord(8, 90.0)])
    assert agg.best_weight == 100.0
    assert agg.best_weight_reps == 6
    assert agg.set_count == 3
    assert agg.weighted_set_count == 3

def test_bodyweight_and_zero_rep_sets():
    agg = fold_sets([SetRecord(10), SetRecord(0, 200.0), SetRecord(-2, 50.0)])
    assert agg.set_count == 1
    assert agg.total_reps == 10
    assert agg.best_weight is None
    assert agg.total_volume == 0

def test_empty_inputs_are_identity():
    assert fold_sets([]).set_count == 0
    assert aggregate_sessions([]) == []
    assert all_time_best_weight([]) is None
    assert summarize_exercises([]) == []
    assert exercise_detail([], T0) is None

def test_two_entries_in_one_workout_fold_into_one_session():
    sessions = aggregate_sessions([rec(1, [(5, 100.0)]), rec(1, [(5, 110.0)])])
    assert len(sessions) == 1
    assert sessions[0].set_count == 2
    assert sessions[0].best_weight == 110.0

def test_summaries_group_by_key_and_latest_name_wins():
    records = [
        rec(1, [(5, 100.0)], name="bench press"),
        rec(2, [(5, 105.0)], name="Bench  Press", when=T0 + timedelta(days=2)),
        rec(2, [(10, 40.0)], name="Row", when=T0 + timedelta(days=2)),
    ]
    summaries = summarize_exercises(records)
    assert [s.key for s in summaries] == ["bench press", "row"]
    bench = summaries[0]
    assert bench.name == "Bench  Press"
    assert bench.session_count == 2
    assert bench.best_weight == 105.0
    assert bench.total_volume == 1025

def test_detail_averages_and_days_since():
    records = [rec(1, [(5, 100.0), (5, 100.0)]), rec(2, [(3, 120.0)], when=T0 + timedelta(days=1))]
    detail = exercise_detail(records, now=T0 + timedelta(days=8, hours=2))
    assert detail.set_count == 3
    assert detail.total_reps == 13
    assert detail.average_reps_per_set == 4.3
    assert detail.average_volume_per_session == 680.0
    assert detail.days_since_last_hit == 7
    assert detail.last_performed_at == T0 + timedelta(days=1)

def test_naive_timestamps_are_utc():
    naive = rec(1, [(1, 1.0)], when=datetime(2026, 3, 9, 12, 0))
    aware = rec(2, [(1, 1.0)], when=datetime(2026, 3, 9, 13, 0, tzinfo=timezone.utc))
    assert [s.session_id for s in aggregate_sessions([naive, aware])] == [2, 1]

def test_rounding_is_half_up():
    assert round_half_up(2.25, 1) == 2.3
    assert display_volume(0.5) == 1
    assert display_volume(None) == 0
    assert safe_average(10, 0) == 0.0
