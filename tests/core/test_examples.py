"""Example synthesis tests: zero values and compact JSON rendering."""

import dataclasses
import enum
from typing import Annotated, Literal, Optional, Sequence, Union

import pytest
from pydantic import BaseModel, Field

from genapi.core.errors import ConfigurationError
from genapi.core.examples import (
    accepts_sequence,
    is_sequence_type,
    render_example,
    render_response_example,
    sequence_element_type,
    zero_value,
)


class Color(enum.Enum):
    RED = "red"
    BLUE = "blue"


class Address(BaseModel):
    city: str
    zip_code: int


class Person(BaseModel):
    name: str = Field(min_length=1)
    age: int
    nickname: Optional[str]
    address: Address
    tags: list[str]
    active: bool = True


@dataclasses.dataclass
class Point:
    x: float
    y: float = 1.0
    label: str = dataclasses.field(default_factory=lambda: "origin")


@pytest.mark.parametrize("tp, expected", [
    (str, ""),
    (int, 0),
    (float, 0.0),
    (bool, False),
    (bytes, b""),
    (Optional[int], None),
    (int | None, None),
    (Union[int, str], 0),
    (Literal["a", "b"], "a"),
    (list[int], []),
    (Sequence[str], []),
    (dict[str, int], {}),
    (dict, {}),
    (None, None),
])
def test_zero_value_of_simple_types(tp, expected):
    assert zero_value(tp) == expected


def test_zero_value_of_enum_is_first_member():
    assert zero_value(Color) is Color.RED


def test_zero_value_of_model_skips_validation_and_keeps_defaults():
    person = zero_value(Person)
    assert person.name == ""
    assert person.age == 0
    assert person.nickname is None
    assert person.address.city == ""
    assert person.tags == []
    assert person.active is True


def test_zero_value_of_dataclass():
    assert zero_value(Point) == Point(x=0.0, y=1.0, label="origin")


@pytest.mark.parametrize("tp, expected", [
    (list[int], True),
    (list, True),
    (tuple[int, ...], True),
    (set[str], True),
    (Sequence[int], True),
    (str, False),
    (bytes, False),
    (dict[str, int], False),
    (Person, False),
])
def test_is_sequence_type(tp, expected):
    assert is_sequence_type(tp) is expected


def test_sequence_element_type():
    assert sequence_element_type(list[Person]) is Person
    assert sequence_element_type(tuple[int, ...]) is int
    assert sequence_element_type(list) is None


def test_render_example_is_compact_and_keeps_unicode():
    assert render_example({"name": "张三", "n": 1}) == '{"name":"张三","n":1}'


def test_render_example_of_model_uses_aliases():
    class Wire(BaseModel):
        session_id: str = Field("", alias="SessionID")

    assert render_example(zero_value(Wire)) == '{"SessionID":""}'


def test_render_response_example_for_sequences():
    assert render_response_example(list[Address], None) == '[{"city":"","zip_code":0}]'
    assert render_response_example(list, [1, 2]) == "[null]"
    assert render_response_example(list[int], [5, 6]) == "[0]"


def test_render_response_example_for_non_sequences():
    assert render_response_example(Address, Address(city="Oslo", zip_code=1)) == (
        '{"city":"Oslo","zip_code":1}'
    )
    assert render_response_example(None, None) == "null"


def test_render_example_rejects_unserializable_values():
    with pytest.raises(ConfigurationError):
        render_example(object())


@pytest.mark.parametrize("tp, expected", [
    (list[str], True),
    (Optional[list[int]], True),
    (list[str] | None, True),
    (Annotated[list[str], "meta"], True),
    (Optional[str], False),
    (Union[int, str], False),
    (str, False),
])
def test_accepts_sequence(tp, expected):
    assert accepts_sequence(tp) is expected
