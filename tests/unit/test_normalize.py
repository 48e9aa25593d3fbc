import enum
import functools
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal

from pydantic import BaseModel

from mcpcat_events.events.models import UNDEFINED
from mcpcat_events.events.normalize import normalize


class Color(enum.Enum):
    RED = 1


class Level(enum.IntEnum):
    HIGH = 3


@dataclass
class Point:
    x: int
    label: str


class Profile(BaseModel):
    name: str
    tags: list[str]


def _nested(levels: int, leaf: object) -> dict:
    obj: dict = {"value": leaf}
    for _ in range(levels):
        obj = {"nested": obj}
    return obj


def test_short_strings_unchanged() -> None:
    assert normalize("hello") == "hello"


def test_long_string_truncated_to_limit_plus_suffix() -> None:
    result = normalize("a" * 33_000)
    assert len(result) == 32_768 + 3
    assert result.endswith("...")
    assert result.startswith("a" * 100)


def test_string_at_exact_limit_unchanged() -> None:
    exact = "a" * 32_768
    assert normalize(exact) == exact


def test_functions_become_markers() -> None:
    def my_func() -> None:
        pass

    assert normalize(my_func) == "[Function: my_func]"
    assert normalize(lambda: None) == "[Function: <anonymous>]"
    assert normalize(functools.partial(int, "1")) == "[Function: <anonymous>]"
    assert normalize(len) == "[Function: len]"


def test_symbol_like_values() -> None:
    assert normalize(Color.RED) == "[Symbol(Color.RED)]"
    assert normalize(object()) == "[Symbol()]"


def test_int_enum_stays_numeric() -> None:
    assert normalize(Level.HIGH) == 3


def test_undefined_becomes_marker() -> None:
    assert normalize(UNDEFINED) == "[undefined]"


def test_big_integers_become_markers() -> None:
    assert normalize(2**53 - 1) == 2**53 - 1
    assert normalize(2**64) == f"[BigInt: {2**64}]"
    assert normalize(-(2**60)) == f"[BigInt: {-(2**60)}]"


def test_non_finite_floats_become_markers() -> None:
    assert normalize(float("nan")) == "[NaN]"
    assert normalize(float("inf")) == "[Infinity]"
    assert normalize(float("-inf")) == "[-Infinity]"


def test_dates_become_iso_strings() -> None:
    assert normalize(datetime(2025, 1, 15, 12, 0, tzinfo=UTC)) == "2025-01-15T12:00:00+00:00"
    assert normalize(date(2025, 1, 15)) == "2025-01-15"


def test_scalars_pass_through() -> None:
    assert normalize(42) == 42
    assert normalize(0) == 0
    assert normalize(-3.14) == -3.14
    assert normalize(True) is True
    assert normalize(False) is False
    assert normalize(None) is None


def test_unknown_objects_are_stringified() -> None:
    assert normalize(Decimal("1.50")) == "1.50"


def test_broken_str_does_not_raise() -> None:
    class Broken:
        def __str__(self) -> str:
            raise RuntimeError("no")

    assert normalize(Broken()) == "[Unserializable: Broken]"


def test_objects_collapse_beyond_depth() -> None:
    result = normalize(_nested(15, "deep"), 5)
    assert result["nested"]["nested"]["nested"]["nested"]["nested"] == "[Object]"


def test_arrays_collapse_beyond_depth() -> None:
    arr: list = ["leaf"]
    for _ in range(15):
        arr = [arr]
    result = normalize(arr, 3)
    assert result[0][0][0] == "[Array]"


def test_depth_zero_collapses_top_level() -> None:
    assert normalize({"a": 1}, 0) == "[Object]"
    assert normalize([1, 2], 0) == "[Array]"
    assert normalize("hello", 0) == "hello"
    assert normalize(42, 0) == 42


def test_object_breadth_limit() -> None:
    wide = {f"key{i}": i for i in range(150)}
    result = normalize(wide, 10, 5)
    assert list(result) == ["key0", "key1", "key2", "key3", "key4", "..."]
    assert result["..."] == "[MaxProperties ~]"


def test_array_breadth_limit() -> None:
    result = normalize(list(range(150)), 10, 5)
    assert result == [0, 1, 2, 3, 4, "[MaxProperties ~]"]


def test_objects_within_breadth_unchanged() -> None:
    assert normalize({"a": 1, "b": 2, "c": 3}, 10, 100) == {"a": 1, "b": 2, "c": 3}


def test_self_reference_is_marked() -> None:
    obj: dict = {"a": 1}
    obj["self"] = obj
    result = normalize(obj)
    assert result == {"a": 1, "self": "[Circular ~]"}


def test_array_self_reference_is_marked() -> None:
    arr: list = [1, 2]
    arr.append(arr)
    assert normalize(arr) == [1, 2, "[Circular ~]"]


def test_shared_subtree_is_not_a_cycle() -> None:
    shared = {"value": "shared"}
    result = normalize({"a": shared, "b": shared})
    assert result == {"a": {"value": "shared"}, "b": {"value": "shared"}}


def test_deep_back_edge_is_marked() -> None:
    obj: dict = {"level1": {"level2": {"level3": {}}}}
    obj["level1"]["level2"]["level3"]["backToRoot"] = obj
    result = normalize(obj)
    assert result["level1"]["level2"]["level3"]["backToRoot"] == "[Circular ~]"


def test_undefined_entries_are_omitted() -> None:
    result = normalize({"a": 1, "b": UNDEFINED, "c": "hello"})
    assert result == {"a": 1, "c": "hello"}


def test_undefined_entries_do_not_count_toward_breadth() -> None:
    result = normalize({"a": UNDEFINED, "b": 1, "c": 2}, 10, 2)
    assert result == {"b": 1, "c": 2}


def test_containers_are_converted() -> None:
    result = normalize({"t": (1, 2), "point": Point(1, "p"), "profile": Profile(name="n", tags=["x"])})
    assert result == {
        "t": [1, 2],
        "point": {"x": 1, "label": "p"},
        "profile": {"name": "n", "tags": ["x"]},
    }


def test_non_string_keys_are_stringified() -> None:
    assert normalize({1: "a", None: "b", 2.5: "c"}) == {"1": "a", "null": "b", "2.5": "c"}
    assert normalize({False: "x"}) == {"false": "x"}


def test_input_is_not_mutated() -> None:
    original = {"text": "x" * 40_000, "items": list(range(200))}
    normalize(original)
    assert len(original["text"]) == 40_000
    assert len(original["items"]) == 200


def test_long_keys_are_capped() -> None:
    result = normalize({"k" * 40_000: 1, "short": 2})
    assert list(result.values()) == [1, 2]
    long_key = next(iter(result))
    assert len(long_key) == 32_768 + 3
    assert long_key.endswith("...")
