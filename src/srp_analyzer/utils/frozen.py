"""
Read-only containers for pydantic models.

A frozen model only rejects attribute assignment; its dict fields stay
mutable. `FrozenMap[K, V]` validates exactly like ``Dict[K, V]`` and then
wraps the result in a `types.MappingProxyType`, so a frozen model cannot be
changed through its mapping fields either. It dumps back to a plain dict.

Sequences use ``Tuple[X, ...]`` instead, which pydantic fills from lists.
"""

from types import MappingProxyType
from typing import Annotated, Any, Dict, Mapping, TypeVar

from pydantic import AfterValidator, SerializerFunctionWrapHandler, WrapSerializer

K = TypeVar("K")
V = TypeVar("V")


def _freeze(value: Dict[Any, Any]) -> Mapping[Any, Any]:
  return MappingProxyType(value)


def _thaw(value: Mapping[Any, Any], handler: SerializerFunctionWrapHandler) -> Any:
  return handler(dict(value))


FrozenMap = Annotated[Dict[K, V], AfterValidator(_freeze), WrapSerializer(_thaw)]
