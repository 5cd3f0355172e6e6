"""Read-only mapping fields for frozen models.

``ConfigDict(frozen=True)`` only blocks attribute assignment; a ``dict`` field
can still be changed in place. ``FrozenMapping[K, V]`` validates like
``Mapping[K, V]``, stores a ``MappingProxyType`` over a private copy, and
serializes back to a plain ``dict``.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any, TypeVar

from pydantic import AfterValidator, SerializerFunctionWrapHandler, WrapSerializer

KeyT = TypeVar("KeyT")
ValueT = TypeVar("ValueT")


def _freeze(value: Mapping[Any, Any]) -> Mapping[Any, Any]:
    return MappingProxyType(dict(value))


def _thaw(value: Mapping[Any, Any], handler: SerializerFunctionWrapHandler) -> Any:
    return handler(dict(value))


FrozenMapping = Annotated[
    Mapping[KeyT, ValueT],
    AfterValidator(_freeze),
    WrapSerializer(_thaw),
]


def empty_mapping() -> Mapping[Any, Any]:
    """Default factory for ``FrozenMapping`` fields."""
    return MappingProxyType({})
