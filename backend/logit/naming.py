# logit/naming.py
"""
Exercise-name normalization.

``normalize_key`` produces the grouping key (never shown to users);
``to_display_name`` produces the title-cased, spelling-corrected label.
"""

# Exact lowercase whole-word matches only
COMMON_WORD_FIXES: dict[str, str] = {
    "dumbell": "dumbbell",
    "barbel": "barbell",
    "barbelll": "barbell",
    "pulldwon": "pulldown",
    "shoudler": "shoulder",
    "deltiod": "deltoid",
    "tricep": "triceps",
    "bicep": "biceps",
}


def collapse_whitespace(raw: str | None) -> str:
    if not isinstance(raw, str):
        return ""
    return " ".join(raw.split())


def normalize_key(raw: str | None) -> str:
    return collapse_whitespace(raw).lower()


def _fix_word(word: str) -> str:
    lower = word.lower()
    fixed = COMMON_WORD_FIXES.get(lower, lower)
    return fixed[:1].upper() + fixed[1:]


def to_display_name(raw: str | None) -> str:
    """
    Title-case each word after running it through COMMON_WORD_FIXES.

    Words are lowercased before the table lookup, so feeding a display name
    back in yields the same display name.
    """
    cleaned = collapse_whitespace(raw)
    if not cleaned:
        return ""
    return " ".join(_fix_word(word) for word in cleaned.split(" "))
