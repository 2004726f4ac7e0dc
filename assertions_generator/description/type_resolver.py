"""
Type resolver.

Classifies an evaluated annotation as an array, an iterable or a plain
reference, and finds the element type of arrays and iterables.

Arrays are tuples (``tuple[T, ...]``). Iterables are classes implementing
``collections.abc.Iterable`` apart from the built-in non-collection
iterables (strings, bytes, mappings). Enum types are iterable over their own
members. When an iterable's element type cannot be read from the annotation
it is looked up through the class hierarchy, and falls back to ``object``.
"""

from __future__ import annotations

import inspect
import types
import typing
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .annotations import evaluate_annotation, function_namespace, raw_annotations
from .type_name import OBJECT_TYPE_NAME, TypeName

# Iterable at runtime but not collections of elements
NON_COLLECTION_ITERABLES: tuple[type, ...] = (str, bytes, bytearray, memoryview, Mapping)


@dataclass(frozen=True)
class ResolvedType:
    """Classification of a declared type."""

    type_name: TypeName
    is_iterable: bool = False
    is_array: bool = False
    element_type_name: TypeName | None = None

    def display(self, relative_to: str | None = None) -> tuple[str, bool, bool, str | None]:
        """Return ``(display name, is iterable, is array, element display name)``."""
        element = self.element_type_name.display(relative_to) if self.element_type_name is not None else None
        return self.type_name.display(relative_to), self.is_iterable, self.is_array, element


def resolve_type(annotation: Any) -> ResolvedType:
    """Resolve an evaluated annotation. Never raises."""
    type_name = TypeName.of(annotation)
    target = _unwrap(annotation)
    if target is typing.Any:
        return ResolvedType(type_name)
    origin = typing.get_origin(target)
    args = typing.get_args(target)

    if isinstance(origin, type):
        cls = origin
    elif isinstance(target, type):
        cls = target
    else:
        return ResolvedType(type_name)

    if cls is tuple:
        return ResolvedType(type_name, is_array=True, element_type_name=_tuple_element(args))
    if issubclass(cls, Enum):
        return ResolvedType(type_name, is_iterable=True, element_type_name=TypeName.of_class(cls))
    if is_iterable_class(cls):
        element = args[0] if args else iterated_type(cls)
        return ResolvedType(type_name, is_iterable=True, element_type_name=TypeName.of(element))
    return ResolvedType(type_name)


def describe_type(annotation: Any, relative_to: str | None = None) -> tuple[str, bool, bool, str | None]:
    """Shortcut for ``resolve_type(annotation).display(relative_to)``."""
    return resolve_type(annotation).display(relative_to)


def is_iterable_class(cls: type) -> bool:
    try:
        return issubclass(cls, Iterable) and not issubclass(cls, NON_COLLECTION_ITERABLES)
    except TypeError:
        return False


def iterated_type(cls: type) -> Any:
    """Best-effort element type of an iterable class that is not parameterized.

    Looks for a parameterized iterable base (``class Chain(list[Error])``)
    and then for the return annotation of ``__iter__``, most-derived class
    first.
    """
    for klass in getattr(cls, "__mro__", (cls,)):
        for base in vars(klass).get("__orig_bases__", ()):
            base_origin = typing.get_origin(base)
            base_args = typing.get_args(base)
            if isinstance(base_origin, type) and is_iterable_class(base_origin) and _is_concrete(base_args):
                return base_args[0]

        iterator = vars(klass).get("__iter__")
        if inspect.isfunction(iterator):
            globalns, localns = function_namespace(iterator, klass)
            returned = evaluate_annotation(raw_annotations(iterator).get("return"), globalns, localns)
            returned_args = typing.get_args(returned)
            if _is_concrete(returned_args):
                return returned_args[0]
    return object


def _is_concrete(args: tuple[Any, ...]) -> bool:
    return bool(args) and not isinstance(args[0], (typing.TypeVar, str))


def _tuple_element(args: tuple[Any, ...]) -> TypeName:
    if len(args) == 2 and args[1] is Ellipsis:
        return TypeName.of(args[0])
    if args and all(arg == args[0] for arg in args):
        return TypeName.of(args[0])
    return OBJECT_TYPE_NAME


def _unwrap(annotation: Any) -> Any:
    """Strip ``Annotated``, ``Optional`` and type variables down to the classified type."""
    while True:
        origin = typing.get_origin(annotation)
        if origin is typing.Annotated:
            annotation = typing.get_args(annotation)[0]
        elif origin is typing.Union or origin is types.UnionType:
            members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
            if len(members) != 1:
                return annotation
            annotation = members[0]
        elif isinstance(annotation, typing.TypeVar):
            annotation = annotation.__bound__ or object
        else:
            return annotation
