import math
import pytest
from logit.naming import collapse_whitespace, normalize_key, to_display_name
from logit.suggestions import inline_hint, query_tokens, rank_suggestions, score_candidate

@pytest.mark.parametrize("raw", ["  Bench   Press ", "BENCH\tpress", "", "   ", "Dumbell  ROW\n"])
def test_normalize_key_is_idempotent(raw):
    once = normalize_key(raw)
    assert normalize_key(once) == once

def test_normalize_key_collapses_and_lowercases():
    assert normalize_key("  Incline   DB\tPress ") == "incline db press"
    assert normalize_key(None) == ""
    assert collapse_whitespace(42) == ""

def test_display_name_fixes_common_typos():
    assert to_display_name("dumbell  curl") == "Dumbbell Curl"
    assert to_display_name("TRICEP pushdown") == "Triceps Pushdown"
    assert to_display_name("lat pulldwon") == "Lat Pulldown"

def test_display_name_has_clean_whitespace_and_is_stable():
    name = to_display_name("   barbel \t  shoudler   press  ")
    assert name == "Barbell Shoulder Press"
    assert name == name.strip() and "  " not in name
    assert to_display_name(name) == name

def test_fixes_only_apply_to_whole_words():
    assert to_display_name("biceps curl") == "Biceps Curl"
    assert to_display_name("bicepcurl") == "Bicepcurl"

def test_bench_example_prefers_incline():
    # "incline bench": contains 190 + word start 45 - 0.5 * 8 = 231
    # "barbell bench press": contains 190 + word start 45 - 0.5 * 14 = 228
    assert score_candidate("bench", "incline bench") == 231
    assert score_candidate("bench", "barbell bench press") == 228
    assert rank_suggestions("bench", ["Barbell Bench Press", "Incline Bench", "Bench"]) == "Incline Bench"

def test_never_suggests_the_query_itself():
    assert rank_suggestions("  bench ", ["Bench", "BENCH"]) is None
    assert score_candidate("bench", "bench") == -math.inf

def test_every_token_must_appear():
    assert rank_suggestions("db row", ["DB Press", "Seated Row"]) is None
    assert rank_suggestions("db row", ["DB Press", "One Arm DB Row"]) == "One Arm DB Row"

def test_prefix_beats_contains():
    assert rank_suggestions("squ", ["Front Squat", "Squat"]) == "Squat"

def test_shorter_candidate_wins_when_match_is_equal():
    assert rank_suggestions("leg", ["Leg Presses", "Leg Curls"]) == "Leg Curls"
    assert rank_suggestions("row", ["Rows  ", "ROWS"]) == "Rows"

def test_empty_query_or_candidates():
    assert rank_suggestions("", ["Bench"]) is None
    assert rank_suggestions("bench", []) is None
    assert rank_suggestions("bench", ["", "   "]) is None
    assert query_tokens("  Incline  bench ") == ["incline", "bench"]
    assert query_tokens(None) == []

def test_inline_hint():
    assert inline_hint("ben", "Bench Press") == "ch Press"
    assert inline_hint("BEN", "Bench Press") == "ch Press"
    assert inline_hint("press", "Bench Press") == "Bench Press"
    assert inline_hint("bench press", "Bench Press") is None
    assert inline_hint("", "Bench Press") is None
    assert inline_hint("ben", None) is None
