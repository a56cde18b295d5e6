import hashlib
import pytest
from logit.errors import NotFoundError
from logit.route_keys import (
    DirectKeyStrategy,
    RederiveStrategy,
    RouteKeyResolver,
    default_resolver,
    is_route_key_shaped,
    to_route_key,
)

def test_route_key_is_deterministic_and_uuid_shaped():
    key = to_route_key("bench press")
    assert key == to_route_key("bench press")
    assert is_route_key_shaped(key)
    assert key.replace("-", "") == hashlib.sha256(b"bench press").hexdigest()[:32]
    assert to_route_key("bench press") != to_route_key("bench presS")

def test_shape_check():
    assert is_route_key_shaped("0A1B2C3D-0000-1111-2222-333344445555")
    assert not is_route_key_shaped("bench press")
    assert not is_route_key_shaped("0a1b2c3d00001111222233334444555")
    assert not is_route_key_shaped("")

class Source:
    def __init__(self, names):
        self.names = names
        self.calls = 0

    def __call__(self, user_id):
        self.calls += 1
        return self.names

def test_plain_name_resolves_directly():
    catalog, history = Source([]), Source([])
    assert default_resolver(catalog, history).resolve("Bench%20%20Press", 1) == "bench press"
    assert history.calls == 0

def test_route_key_found_in_catalog():
    catalog, history = Source(["squat", "bench press"]), Source([])
    resolver = default_resolver(catalog, history)
    assert resolver.resolve(to_route_key("bench press"), 1) == "bench press"
    assert history.calls == 0

def test_route_key_found_only_in_history():
    catalog, history = Source(["squat"]), Source(["Old  Lift", "squat"])
    assert default_resolver(catalog, history).resolve(to_route_key("old lift"), 1) == "old lift"

def test_uppercase_route_key_still_resolves():
    catalog = Source(["row"])
    assert default_resolver(catalog, Source([])).resolve(to_route_key("row").upper(), 1) == "row"

def test_exhausted_strategies_raise_not_found():
    with pytest.raises(NotFoundError):
        default_resolver(Source(["squat"]), Source(["row"])).resolve(to_route_key("nothing"), 1)
    with pytest.raises(NotFoundError):
        default_resolver(Source([]), Source([])).resolve("   ", 1)

def test_strategies_are_tried_in_order():
    seen = []

    class Recorder:
        def __init__(self, tag, answer=None):
            self.tag, self.answer = tag, answer

        def resolve(self, candidate, user_id):
            seen.append(self.tag)
            return self.answer

    resolver = RouteKeyResolver([Recorder("a"), Recorder("b", "found"), Recorder("c")])
    assert resolver.resolve("x", 1) == "found"
    assert seen == ["a", "b"]

def test_direct_and_rederive_pieces():
    key = to_route_key("row")
    assert DirectKeyStrategy(Source([])).resolve("row", 1) == "row"
    assert DirectKeyStrategy(Source([])).resolve(key, 1) is None
    assert RederiveStrategy(Source(["Row"])).resolve(key, 1) == "row"
    assert RederiveStrategy(Source(["Row"])).resolve("row", 1) is None
