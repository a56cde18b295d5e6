# logit/suggestions.py
"""Inline autocomplete ranking over a user's previously logged exercise names."""
from __future__ import annotations

import math
from typing import Iterable, Optional

from logit.naming import collapse_whitespace, normalize_key

# Tunable weights
PREFIX_BONUS = 280
CONTAINS_BONUS = 190
WORD_START_BONUS = 45
MID_WORD_BONUS = 22
LENGTH_PENALTY = 0.5


def query_tokens(raw: str | None) -> list[str]:
    key = normalize_key(raw)
    return key.split(" ") if key else []


def score_candidate(query_key: str, candidate_key: str) -> float:
    """Score one candidate key; ``-inf`` means the candidate is rejected."""
    if not query_key or query_key == candidate_key:
        return -math.inf

    tokens = query_key.split(" ")
    if any(token not in candidate_key for token in tokens):
        return -math.inf

    score = 0.0
    if candidate_key.startswith(query_key):
        score += PREFIX_BONUS
    elif query_key in candidate_key:
        score += CONTAINS_BONUS

    for token in tokens:
        index = candidate_key.find(token)
        starts_word = index == 0 or candidate_key[index - 1] == " "
        score += WORD_START_BONUS if starts_word else MID_WORD_BONUS

    score -= LENGTH_PENALTY * max(0, len(candidate_key) - len(query_key))
    return score


def rank_suggestions(query: str | None, candidates: Iterable[str]) -> Optional[str]:
    """Best candidate for ``query``, or None. Ties go to the shorter display name."""
    query_key = normalize_key(query)
    if not query_key:
        return None

    best_name: Optional[str] = None
    best_score = -math.inf
    for candidate in candidates:
        name = collapse_whitespace(candidate)
        if not name:
            continue
        score = score_candidate(query_key, normalize_key(name))
        if score == -math.inf:
            continue
        if best_name is None or score > best_score or (
            score == best_score and len(name) < len(best_name)
        ):
            best_name = name
            best_score = score
    return best_name


def inline_hint(typed: str | None, suggestion: str | None) -> Optional[str]:
    """Text to render after the caret: the completion tail, or the whole suggestion."""
    if not suggestion:
        return None
    current = typed if isinstance(typed, str) else ""
    current_key = normalize_key(current)
    if not current_key or current_key == normalize_key(suggestion):
        return None
    if suggestion.lower().startswith(current.lower()):
        return suggestion[len(current):]
    return suggestion
