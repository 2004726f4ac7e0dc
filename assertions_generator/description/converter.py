"""
Class to ClassDescription converter.

Builds the ClassDescription of one class from its runtime metadata. The
conversion only reads class dictionaries, signatures and annotations: the
described class is never instantiated and none of its methods are called.
"""

from __future__ import annotations

import inspect
import logging
import typing
from abc import ABCMeta

from .annotations import raw_annotations
from .description_nodes import ClassDescription
from .property_extractor import class_hierarchy, extract_properties, is_root_type
from .type_name import TypeName, module_name_of, nested_class_name

logger = logging.getLogger(__name__)


class ClassDescriptionError(ValueError):
    """Raised when the object to describe is not a class."""


def is_interface(cls: type) -> bool:
    """Whether a class only declares a contract.

    Protocols are interfaces. So are abstract base classes declaring at least
    one abstract method, only abstract public methods and no public fields.
    """
    if getattr(cls, "_is_protocol", False):
        return True
    if not isinstance(cls, ABCMeta) or not getattr(cls, "__abstractmethods__", None):
        return False
    for name, member in vars(cls).items():
        if name.startswith("_"):
            continue
        function = member.fget if isinstance(member, property) else getattr(member, "__func__", member)
        if callable(function) and not getattr(function, "__isabstractmethod__", False):
            return False
    return all(name.startswith("_") for name in raw_annotations(cls))


def super_type_of(cls: type) -> TypeName | None:
    """Identity of the immediate superclass, ignoring interfaces and root types."""
    if is_interface(cls):
        return None
    for base in getattr(cls, "__bases__", ()):
        if is_root_type(base) or is_interface(base):
            continue
        return TypeName.of_class(base)
    return None


class ClassToClassDescriptionConverter:
    """Converts classes to ClassDescription values."""

    def convert(self, cls: type) -> ClassDescription:
        """
        Describe a class.

        Args:
            cls: The class (or interface) to describe

        Returns:
            The ClassDescription of the class

        Raises:
            ClassDescriptionError: If cls is not a class
        """
        if not inspect.isclass(cls) or typing.get_origin(cls) is not None:
            raise ClassDescriptionError(f"Expected a class to describe, got {cls!r}")

        properties = extract_properties(cls)
        description = ClassDescription(
            class_name=nested_class_name(cls).rsplit(".", 1)[-1],
            class_name_with_outer_class=nested_class_name(cls),
            module_name=module_name_of(cls),
            super_type=super_type_of(cls),
            getters_descriptions=properties.getters,
            declared_getters_descriptions=properties.declared_getters,
            fields_descriptions=properties.fields,
            declared_fields_descriptions=properties.declared_fields,
        )
        logger.debug(
            "Described %s: %d getters (%d declared), %d fields (%d declared), hierarchy %s",
            description.fully_qualified_name,
            len(properties.getters),
            len(properties.declared_getters),
            len(properties.fields),
            len(properties.declared_fields),
            [klass.__name__ for klass in class_hierarchy(cls)],
        )
        return description


def convert_to_class_description(cls: type) -> ClassDescription:
    """Describe a class with a default converter."""
    return ClassToClassDescriptionConverter().convert(cls)
