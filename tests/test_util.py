import datetime

import pytest

from jsonapi_flatten.util import (
    deep_clone,
    extract_resource_identifier,
    generate_resource_key,
    hybridmethod,
    is_empty,
    is_valid_resource,
    map_array,
    safe_assign,
)


def test_generate_resource_key():
    assert generate_resource_key({"type": "user", "id": "101"}) == "user-101"
    assert generate_resource_key({"type": "user", "id": 101}) == "user-101"


def test_safe_assign_later_sources_win():
    target = {"a": 1}
    result = safe_assign(target, {"a": 2, "b": 2}, None, [("c", 3)], {"b": 3})
    assert result is target
    assert target == {"a": 2, "b": 3}


def test_deep_clone_shares_nothing():
    original = {"tags": ["a", {"b": 1}], "at": datetime.date(2024, 1, 1)}
    cloned = deep_clone(original)
    assert cloned == original
    assert cloned["tags"] is not original["tags"]
    assert cloned["tags"][1] is not original["tags"][1]
    assert deep_clone(None) is None


@pytest.mark.parametrize("value,expected", [(None, True), ("", True), ([], True), ({}, True), (0, False), (False, False), ("x", False), ({"a": None}, False)])
def test_is_empty(value, expected):
    assert is_empty(value) is expected


def test_map_array():
    assert map_array([1, 2, 3], lambda item: item * 2) == [2, 4, 6]


@pytest.mark.parametrize(
    "resource,expected",
    [
        ({"type": "user", "id": "1"}, True),
        ({"type": "user", "id": 1}, True),
        ({"type": "user", "id": 0}, True),
        ({"type": "user", "id": ""}, False),
        ({"type": "", "id": "1"}, False),
        ({"type": "user", "id": True}, False),
        ({"type": "user"}, False),
        ({"id": "1"}, False),
        ("user-1", False),
        (None, False),
    ],
)
def test_is_valid_resource(resource, expected):
    assert is_valid_resource(resource) is expected


def test_extract_resource_identifier():
    resource = {"type": "user", "id": "1", "attributes": {"name": "x"}, "meta": {"ts": "2024-01-01"}}
    identifier = extract_resource_identifier(resource)
    assert identifier == {"type": "user", "id": "1", "meta": {"ts": "2024-01-01"}}
    assert identifier["meta"] is not resource["meta"]
    assert extract_resource_identifier({"type": "user", "id": "1"}) == {"type": "user", "id": "1"}


class _Greeter:
    def __init__(self, name):
        self.name = name

    @hybridmethod
    def greet(self):
        return f"hello {self.name}"

    @greet.classmethod
    def greet(cls, name):
        return cls(name).greet()


def test_hybridmethod():
    assert _Greeter("instance").greet() == "hello instance"
    assert _Greeter.greet("class") == "hello class"


def test_hybridmethod_without_class_implementation():
    class _Instance:
        @hybridmethod
        def run(self):
            return "run"

    assert _Instance().run() == "run"
    with pytest.raises(AttributeError):
        _Instance.run
