"""
Description module.

Converts classes into ClassDescription values: type resolution, property
extraction and the class-to-description converter.
"""

from __future__ import annotations

from .converter import (
    ClassDescriptionError,
    ClassToClassDescriptionConverter,
    convert_to_class_description,
    is_interface,
)
from .description_nodes import (
    ClassDescription,
    DescriptionSet,
    FieldDescription,
    GetterDescription,
)
from .type_name import TypeName
from .type_resolver import ResolvedType, describe_type, resolve_type

__all__ = [
    "ClassDescription",
    "ClassDescriptionError",
    "ClassToClassDescriptionConverter",
    "DescriptionSet",
    "FieldDescription",
    "GetterDescription",
    "ResolvedType",
    "TypeName",
    "convert_to_class_description",
    "describe_type",
    "is_interface",
    "resolve_type",
]
