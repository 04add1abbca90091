"""Tests for the reference and value equality strategies."""

from collections import OrderedDict
from datetime import date

from digestx._equality import _UNSET, are_equal, snapshot


class _Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y


class _Slotted:
    __slots__ = ("x", "y")

    def __init__(self, x, y):
        self.x = x
        self.y = y


class TestReferenceEquality:
    def test_same_object(self):
        lst = [1, 2]
        assert are_equal(lst, lst)

    def test_scalars_by_value(self):
        assert are_equal(1, 1)
        assert are_equal("abc", "ab" + "c")
        assert not are_equal(1, 2)

    def test_nan_equals_nan(self):
        assert are_equal(float("nan"), float("nan"))

    def test_nan_not_equal_to_number(self):
        assert not are_equal(float("nan"), 0.0)

    def test_unset_never_equal(self):
        assert not are_equal(None, _UNSET)
        assert not are_equal(_UNSET, None)

    def test_none(self):
        assert are_equal(None, None)

    def test_distinct_equal_containers_differ(self):
        assert not are_equal([1, 2], [1, 2])
        assert not are_equal({"a": 1}, {"a": 1})

    def test_bool_is_not_int(self):
        assert not are_equal(1, True)
        assert not are_equal(0, False)
        assert are_equal(True, True)

    def test_int_and_float_differ(self):
        assert not are_equal(1, 1.0)

    def test_objects_by_identity(self):
        point = _Point(1, 2)
        assert are_equal(point, point)
        assert not are_equal(point, _Point(1, 2))


class TestValueEquality:
    def test_nested_structures(self):
        a = {"x": [1, {"y": (2, 3)}]}
        b = {"x": [1, {"y": (2, 3)}]}
        assert are_equal(a, b, by_value=True)

    def test_detects_nested_difference(self):
        assert not are_equal({"x": [1, 2]}, {"x": [1, 3]}, by_value=True)

    def test_detects_length_difference(self):
        assert not are_equal([1, 2, 3], [1, 2, 3, 4], by_value=True)

    def test_detects_key_difference(self):
        assert not are_equal({"a": 1}, {"b": 1}, by_value=True)

    def test_nan_inside_structures(self):
        assert are_equal([float("nan")], [float("nan")], by_value=True)

    def test_list_and_tuple_differ(self):
        assert not are_equal([1, 2], (1, 2), by_value=True)

    def test_mapping_types_compare_by_content(self):
        assert are_equal({"a": 1}, OrderedDict(a=1), by_value=True)

    def test_strings_are_leaves(self):
        assert are_equal("abc", "abc", by_value=True)
        assert not are_equal("abc", ["a", "b", "c"], by_value=True)

    def test_unset_never_equal(self):
        assert not are_equal([], _UNSET, by_value=True)
        assert not are_equal(None, _UNSET, by_value=True)

    def test_bool_is_not_int(self):
        assert not are_equal([1], [True], by_value=True)

    def test_plain_objects_by_fields(self):
        assert are_equal(_Point(1, 2), _Point(1, 2), by_value=True)
        assert not are_equal(_Point(1, 2), _Point(1, 3), by_value=True)

    def test_slotted_objects_by_fields(self):
        assert are_equal(_Slotted(1, [2]), _Slotted(1, [2]), by_value=True)
        assert not are_equal(_Slotted(1, [2]), _Slotted(1, [3]), by_value=True)

    def test_objects_of_different_types_differ(self):
        assert not are_equal(_Point(1, 2), _Slotted(1, 2), by_value=True)

    def test_sets(self):
        assert are_equal({1, 2}, {2, 1}, by_value=True)
        assert not are_equal({1, 2}, {1}, by_value=True)

    def test_structure_equals_its_snapshot(self):
        value = {"points": [_Point(1, {"tags": {"a"}}), _Slotted(2, (3,))]}
        assert are_equal(value, snapshot(value), by_value=True)

    def test_leaf_objects_use_their_own_eq(self):
        day = date(2024, 1, 1)
        assert are_equal(day, snapshot(day), by_value=True)
        assert not are_equal(day, date(2024, 1, 2), by_value=True)


class TestSnapshot:
    def test_independent_copy(self):
        original = {"items": [1, 2]}
        copied = snapshot(original)
        original["items"].append(3)
        assert copied == {"items": [1, 2]}
        assert are_equal(copied, {"items": [1, 2]}, by_value=True)
