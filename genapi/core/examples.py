"""Example Values: zero-valued instances of declared types, rendered as compact JSON.

Invariants:
    - zero_value() never runs pydantic validation (model_construct), so empty
      strings survive even where a field constraint would reject them
    - Fields with defaults keep their defaults; required fields get the zero of their annotation
    - render_example() output is compact JSON with non-ASCII characters preserved
"""

import collections.abc
import dataclasses
import enum
import json
import types
import typing
from typing import Any, Literal, Union, get_args, get_origin

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

from genapi.core.errors import ConfigurationError

_SCALAR_ZEROS: dict[type, Any] = {
    str: "",
    int: 0,
    float: 0.0,
    bool: False,
    bytes: b"",
}

_SEQUENCE_ORIGINS = (
    list, tuple, set, frozenset,
    collections.abc.Sequence, collections.abc.MutableSequence,
    collections.abc.Set, collections.abc.MutableSet, collections.abc.Iterable,
)

_MAPPING_ORIGINS = (
    dict, collections.abc.Mapping, collections.abc.MutableMapping,
)

_UNION_ORIGINS: tuple[Any, ...] = (Union, getattr(types, "UnionType", Union))


def is_sequence_type(tp: Any) -> bool:
    """True for list-like declared types (list[X], tuple[X, ...], set[X]...)."""
    if tp in (str, bytes):
        return False
    origin = get_origin(tp) or tp
    return isinstance(origin, type) and origin in _SEQUENCE_ORIGINS


def accepts_sequence(tp: Any) -> bool:
    """True for sequence types and for unions with a sequence member (Optional[list[X]])."""
    if get_origin(tp) is typing.Annotated:
        tp = get_args(tp)[0]
    if get_origin(tp) in _UNION_ORIGINS:
        return any(accepts_sequence(arg) for arg in get_args(tp))
    return is_sequence_type(tp)


def sequence_element_type(tp: Any) -> Any:
    """Element type of a sequence type, or None when unparameterised."""
    args = [a for a in get_args(tp) if a is not Ellipsis]
    return args[0] if args else None


def zero_value(tp: Any) -> Any:
    """Build the zero value of a declared type."""
    if tp is None or tp is type(None) or tp is Any:
        return None
    if tp in _SCALAR_ZEROS:
        return _SCALAR_ZEROS[tp]

    origin = get_origin(tp)
    if origin is typing.Annotated:
        return zero_value(get_args(tp)[0])
    if origin in _UNION_ORIGINS:
        args = get_args(tp)
        if type(None) in args:
            return None
        return zero_value(args[0])
    if origin is Literal:
        return get_args(tp)[0]
    if origin is not None:
        if origin in _MAPPING_ORIGINS:
            return {}
        if origin in _SEQUENCE_ORIGINS:
            return []
        return zero_value(origin)

    if isinstance(tp, type):
        if issubclass(tp, BaseModel):
            return _zero_model(tp)
        if dataclasses.is_dataclass(tp):
            return _zero_dataclass(tp)
        if issubclass(tp, enum.Enum):
            return next(iter(tp), None)
        if tp in _MAPPING_ORIGINS:
            return {}
        if tp in _SEQUENCE_ORIGINS:
            return []
        for scalar, zero in _SCALAR_ZEROS.items():
            if issubclass(tp, scalar):
                return tp(zero)
    return None


def _zero_model(model: type[BaseModel]) -> BaseModel:
    values = {
        name: zero_value(info.annotation)
        for name, info in model.model_fields.items()
        if info.is_required()
    }
    return model.model_construct(**values)


def _zero_dataclass(cls: type) -> Any:
    hints = typing.get_type_hints(cls)
    values = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            values[f.name] = zero_value(hints.get(f.name))
    return cls(**values)


def render_example(value: Any) -> str:
    """Serialize an example value to compact JSON."""
    try:
        encoded = jsonable_encoder(value)
        return json.dumps(encoded, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"cannot render example value of type {type(value).__name__}: {e}",
        ) from e


def render_response_example(response_type: Any, example: Any) -> str:
    """Sequence responses always render as a one-element array of the element's zero value."""
    if response_type is not None and is_sequence_type(response_type):
        element = zero_value(sequence_element_type(response_type))
        return "[" + render_example(element) + "]"
    return render_example(example)
