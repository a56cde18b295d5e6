# logit/route_keys.py
"""
URL identifiers for exercises.

Route keys are a SHA-256 digest of the normalized name laid out like a UUID.
They are not random and not secret; there is no inverse, so resolving one means
re-deriving keys for every name the user is known to have logged.
"""
from __future__ import annotations

import hashlib
import re
from typing import Callable, Iterable, Optional, Protocol, Sequence
from urllib.parse import unquote

from logit.errors import NotFoundError
from logit.naming import normalize_key

_ROUTE_KEY_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


def to_route_key(normalized_key: str) -> str:
    digest = hashlib.sha256(normalized_key.encode("utf-8")).hexdigest()[:32]
    return f"{digest[:8]}-{digest[8:12]}-{digest[12:16]}-{digest[16:20]}-{digest[20:32]}"


def is_route_key_shaped(value: str) -> bool:
    return bool(_ROUTE_KEY_RE.match(value or ""))


class ResolverStrategy(Protocol):
    def resolve(self, candidate: str, user_id: int) -> Optional[str]: ...


KeySource = Callable[[int], Iterable[str]]


class DirectKeyStrategy:
    """The segment is already a name: accept it if the catalog knows it or it can't be a route key."""

    def __init__(self, catalog_keys: KeySource):
        self.catalog_keys = catalog_keys

    def resolve(self, candidate: str, user_id: int) -> Optional[str]:
        if not is_route_key_shaped(candidate):
            return candidate
        if candidate in set(self.catalog_keys(user_id)):
            return candidate
        return None


class RederiveStrategy:
    """Recompute route keys for known names until one matches."""

    def __init__(self, keys: KeySource):
        self.keys = keys

    def resolve(self, candidate: str, user_id: int) -> Optional[str]:
        if not is_route_key_shaped(candidate):
            return None
        for raw in self.keys(user_id):
            key = normalize_key(raw)
            if key and to_route_key(key) == candidate:
                return key
        return None


class RouteKeyResolver:
    def __init__(self, strategies: Sequence[ResolverStrategy]):
        self.strategies = list(strategies)

    def resolve(self, segment: str, user_id: int) -> str:
        candidate = normalize_key(unquote(segment or ""))
        if not candidate:
            raise NotFoundError("Exercise not found.")
        for strategy in self.strategies:
            found = strategy.resolve(candidate, user_id)
            if found:
                return found
        raise NotFoundError("Exercise not found.")


def default_resolver(catalog_keys: KeySource, history_names: KeySource) -> RouteKeyResolver:
    """Direct name, then catalog re-derivation, then raw history names."""
    return RouteKeyResolver([
        DirectKeyStrategy(catalog_keys),
        RederiveStrategy(catalog_keys),
        RederiveStrategy(history_names),
    ])
