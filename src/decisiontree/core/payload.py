"""
Payload schema handling.

Every node of a tree carries a payload with the same schema. The schema is
derived from a payload value:

- pydantic models: the model class (field types are fixed by the class)
- named tuples: the class plus the type of every field value
- mappings: the ordered ``(key, value type)`` pairs
- anything else: the value's type

Two payloads are compatible iff their schemas compare equal.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, Mapping, Tuple, TypeVar

from pydantic import BaseModel

from decisiontree.core.errors import PayloadSchemaMismatch

P = TypeVar("P")


def _is_named_tuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def schema_of(payload: Any) -> Hashable:
    """Return a hashable description of the payload's shape."""
    if isinstance(payload, BaseModel):
        return type(payload)
    if _is_named_tuple(payload):
        fields: Tuple[Tuple[str, type], ...] = tuple(
            (name, type(getattr(payload, name))) for name in payload._fields
        )
        return (type(payload), fields)
    if isinstance(payload, Mapping):
        return tuple((key, type(value)) for key, value in payload.items())
    return type(payload)


def describe_schema(schema: Hashable) -> str:
    """Human-readable rendering of a schema for messages."""
    if isinstance(schema, type):
        return schema.__name__
    if isinstance(schema, tuple) and len(schema) == 2 and isinstance(schema[0], type):
        cls, fields = schema
        inner = ", ".join(f"{name}: {t.__name__}" for name, t in fields)
        return f"{cls.__name__}({inner})"
    if isinstance(schema, tuple):
        inner = ", ".join(f"{name}: {t.__name__}" for name, t in schema)
        return "{" + inner + "}"
    return repr(schema)


def check_payload(expected: Hashable, payload: Any) -> Any:
    """Return ``payload`` unchanged if its schema equals ``expected``."""
    actual = schema_of(payload)
    if actual != expected:
        raise PayloadSchemaMismatch(describe_schema(expected), describe_schema(actual))
    return payload


def produce_payload(payload_factory: Callable[[], P], expected: Hashable) -> P:
    """Invoke a zero-argument payload factory and check its result."""
    return check_payload(expected, payload_factory())


def payload_field(payload: Any, name: str) -> Any:
    """Read a named field from a payload; raise AttributeError if it has none."""
    if isinstance(payload, Mapping):
        try:
            return payload[name]
        except KeyError:
            raise AttributeError(name) from None
    if isinstance(payload, BaseModel):
        if name in type(payload).model_fields:
            return getattr(payload, name)
        raise AttributeError(name)
    if _is_named_tuple(payload) and name in payload._fields:
        return getattr(payload, name)
    raise AttributeError(name)


__all__ = ["schema_of", "describe_schema", "check_payload", "produce_payload", "payload_field"]
