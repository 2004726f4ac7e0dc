"""
Property extractor.

Collects the accessors and public fields of a class and of its ancestors,
most-derived class first. A member name defined on a class shadows the same
name on its ancestors, exactly like attribute lookup, and the first
description built for a property name wins.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import logging
import re
import typing
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from .. import markers
from ..utils import lower_first
from .annotations import class_namespace, evaluate_annotation, function_namespace, raw_annotations
from .description_nodes import BOOLEAN_TYPE_NAME, DescriptionSet, FieldDescription, GetterDescription
from .type_name import ANY_TYPE_NAME, TypeName
from .type_resolver import resolve_type

logger = logging.getLogger(__name__)

# Members of classes from these modules are provided by the runtime and never described
ROOT_MODULES = {"builtins", "abc", "enum", "typing", "typing_extensions", "collections.abc"}

# get_name / is_active / getName / isActive
_ACCESSOR_NAME_RE = re.compile(r"^(?:get|is)(?:_(?P<snake>[A-Za-z0-9]\w*)|(?P<camel>[A-Z]\w*))$")

# "Raises:" section of a Google-style docstring
_RAISES_SECTION_RE = re.compile(r"^\s*Raises:\s*$")
_RAISES_ENTRY_RE = re.compile(r"^\s+(?P<name>[A-Za-z_][\w.]*)\s*:")


@dataclass(frozen=True)
class ClassProperties:
    """The four property collections of a class."""

    getters: DescriptionSet[GetterDescription]
    declared_getters: DescriptionSet[GetterDescription]
    fields: DescriptionSet[FieldDescription]
    declared_fields: DescriptionSet[FieldDescription]


@dataclass(frozen=True)
class _Accessor:
    property_name: str
    function: Any
    is_property: bool
    is_predicate: bool = False  # is_x / isX, described only when boolean


def is_root_type(cls: type) -> bool:
    return cls is object or getattr(cls, "__module__", None) in ROOT_MODULES


def class_hierarchy(cls: type) -> list[type]:
    """The class and its ancestors in method resolution order, root types excluded."""
    return [klass for klass in inspect.getmro(cls) if not is_root_type(klass)]


def property_name_of(accessor_name: str) -> str | None:
    """Strip the accessor prefix: ``get_first_name`` -> ``first_name``, ``getFirstName`` -> ``firstName``."""
    match = _ACCESSOR_NAME_RE.match(accessor_name)
    if match is None:
        return None
    return lower_first(match.group("snake") or match.group("camel"))


def extract_properties(cls: type) -> ClassProperties:
    """Extract the getter and field descriptions of a class."""
    hierarchy = class_hierarchy(cls)
    getters, declared_getters = _split_declared(cls, _iter_getters(hierarchy))
    fields, declared_fields = _split_declared(cls, _iter_fields(cls, hierarchy))
    return ClassProperties(
        getters=DescriptionSet(getters),
        declared_getters=DescriptionSet(declared_getters),
        fields=DescriptionSet(fields),
        declared_fields=DescriptionSet(declared_fields),
    )


def _split_declared(cls: type, described: Iterator[tuple[type, Any]]) -> tuple[list[Any], list[Any]]:
    """Keep the first description per property name and split out those declared on ``cls``."""
    all_descriptions: dict[str, Any] = {}
    declared: list[Any] = []
    for owner, description in described:
        if description.property_name in all_descriptions:
            continue
        all_descriptions[description.property_name] = description
        if owner is cls:
            declared.append(description)
    return list(all_descriptions.values()), declared


# Getters


def _iter_getters(hierarchy: list[type]) -> Iterator[tuple[type, GetterDescription]]:
    seen: set[str] = set()
    for owner in hierarchy:
        for member_name, member in vars(owner).items():
            if member_name in seen:
                continue
            seen.add(member_name)
            accessor = _as_accessor(member_name, member)
            if accessor is None or markers.is_skipped(accessor.function):
                continue
            description = _describe_getter(owner, member_name, accessor)
            if accessor.is_predicate and description.type_name not in (BOOLEAN_TYPE_NAME, ANY_TYPE_NAME):
                logger.debug("Ignoring %s.%s: not a boolean predicate", owner.__qualname__, member_name)
                continue
            yield owner, description


def _as_accessor(member_name: str, member: Any) -> _Accessor | None:
    if isinstance(member, property):
        if member.fget is None or member_name.startswith("_"):
            return None
        return _Accessor(member_name, member.fget, is_property=True)
    if isinstance(member, functools.cached_property):
        if member_name.startswith("_"):
            return None
        return _Accessor(member_name, member.func, is_property=True)
    if not inspect.isfunction(member):
        # staticmethod and classmethod objects are not instance accessors
        return None

    property_name = property_name_of(member_name)
    if property_name is None or not _takes_only_self(member) or _returns_none(member):
        return None
    return _Accessor(property_name, member, is_property=False, is_predicate=member_name.startswith("is"))


def _takes_only_self(function: Any) -> bool:
    try:
        parameters = list(inspect.signature(function).parameters.values())
    except (TypeError, ValueError):
        return False
    return len(parameters) == 1 and parameters[0].kind in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    )


def _returns_none(function: Any) -> bool:
    returned = raw_annotations(function).get("return", inspect.Parameter.empty)
    return returned is None or returned is type(None) or returned == "None"


def _describe_getter(owner: type, member_name: str, accessor: _Accessor) -> GetterDescription:
    globalns, localns = function_namespace(accessor.function, owner)
    annotations = raw_annotations(accessor.function)
    if "return" in annotations:
        returned = evaluate_annotation(annotations["return"], globalns, localns)
    else:
        returned = typing.Any
    resolved = resolve_type(returned)
    return GetterDescription(
        name=accessor.property_name,
        accessor_name=member_name,
        is_property=accessor.is_property,
        type_name=resolved.type_name,
        element_type_name=resolved.element_type_name,
        is_iterable_type=resolved.is_iterable,
        is_array_type=resolved.is_array,
        exceptions=_declared_exceptions(accessor.function, globalns, localns),
    )


def _declared_exceptions(function: Any, globalns: dict[str, Any], localns: dict[str, Any]) -> tuple[TypeName, ...]:
    declared = markers.declared_raises(function)
    if declared is not None:
        return tuple(TypeName.of(exception) for exception in declared)
    return tuple(
        TypeName.of(evaluate_annotation(name, globalns, localns)) for name in _docstring_raises(function)
    )


def _docstring_raises(function: Any) -> list[str]:
    """Exception names listed in the ``Raises:`` section of a docstring."""
    docstring = inspect.getdoc(function)
    if not docstring:
        return []
    names: list[str] = []
    in_section = False
    entry_indent: int | None = None
    for line in docstring.splitlines():
        if _RAISES_SECTION_RE.match(line):
            in_section = True
            continue
        if not in_section:
            continue
        if line.strip() and not line[:1].isspace():
            break
        indent = len(line) - len(line.lstrip())
        if entry_indent is None and line.strip():
            entry_indent = indent
        if indent != entry_indent:
            continue
        match = _RAISES_ENTRY_RE.match(line)
        if match is not None and match.group("name") not in names:
            names.append(match.group("name"))
    return names


# Fields


def _iter_fields(cls: type, hierarchy: list[type]) -> Iterator[tuple[type, FieldDescription]]:
    dataclass_fields = getattr(cls, "__dataclass_fields__", {}) if dataclasses.is_dataclass(cls) else {}
    seen: set[str] = set()
    for owner in hierarchy:
        globalns, localns = class_namespace(owner)
        for name, raw in raw_annotations(owner).items():
            if name in seen:
                continue
            seen.add(name)
            if name.startswith("_") or _is_behaviour(cls, name):
                continue
            annotation = evaluate_annotation(raw, globalns, localns)
            if _is_class_level(annotation) or _is_skipped_field(annotation, dataclass_fields.get(name)):
                continue
            resolved = resolve_type(annotation)
            yield owner, FieldDescription(
                name=name,
                type_name=resolved.type_name,
                element_type_name=resolved.element_type_name,
                is_iterable_type=resolved.is_iterable,
                is_array_type=resolved.is_array,
            )


def _is_behaviour(cls: type, name: str) -> bool:
    member = inspect.getattr_static(cls, name, None)
    return isinstance(member, (property, functools.cached_property, staticmethod, classmethod)) or inspect.isfunction(
        member
    )


def _is_class_level(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar", "InitVar", "dataclasses.InitVar"))
    if isinstance(annotation, dataclasses.InitVar):
        return True
    return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar


def _is_skipped_field(annotation: Any, dataclass_field: dataclasses.Field | None) -> bool:
    if dataclass_field is not None and dataclass_field.metadata.get(markers.SKIP_GENERATION):
        return True
    if typing.get_origin(annotation) is typing.Annotated:
        return any(markers.is_skip_marker(metadata) for metadata in annotation.__metadata__)
    return False
