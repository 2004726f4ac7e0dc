"""
Description node definitions.

These nodes are the output of the class description converter: immutable
values describing a class's observable properties, ready for assertion
generation.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Set
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .type_name import TypeName

BOOLEAN_TYPE_NAME = TypeName("bool", "builtins")


@dataclass(frozen=True)
class PropertyDescription:
    """Common part of getter and field descriptions."""

    type_name: TypeName = field(default_factory=lambda: TypeName("object", "builtins"))
    element_type_name: TypeName | None = None
    is_iterable_type: bool = False
    is_array_type: bool = False

    @property
    def property_name(self) -> str:
        raise NotImplementedError

    @property
    def is_boolean_type(self) -> bool:
        return self.type_name == BOOLEAN_TYPE_NAME

    def type_display(self, relative_to: str | None = None) -> str:
        return self.type_name.display(relative_to)

    def element_type_display(self, relative_to: str | None = None) -> str | None:
        if self.element_type_name is None:
            return None
        return self.element_type_name.display(relative_to)


@dataclass(frozen=True)
class GetterDescription(PropertyDescription):
    """An accessor method or property."""

    name: str = ""  # Property name (prefix stripped, first letter lower-cased)
    accessor_name: str = ""  # Member name on the class (e.g., "get_name")
    is_property: bool = False  # Accessed as an attribute rather than called
    exceptions: tuple[TypeName, ...] = ()

    @property
    def property_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class FieldDescription(PropertyDescription):
    """A public field."""

    name: str = ""

    @property
    def property_name(self) -> str:
        return self.name


D = TypeVar("D", bound=PropertyDescription)


class DescriptionSet(Set, Generic[D]):
    """Immutable set of descriptions, unique by property name.

    Iteration follows insertion order; equality ignores it.
    """

    __slots__ = ("_items",)

    def __init__(self, descriptions: Iterable[D] = ()):
        items: dict[str, D] = {}
        for description in descriptions:
            items.setdefault(description.property_name, description)
        self._items = tuple(items.values())

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[D]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __hash__(self) -> int:
        return self._hash()

    def __repr__(self) -> str:
        return f"DescriptionSet({list(self._items)!r})"

    def get(self, property_name: str) -> D | None:
        for description in self._items:
            if description.property_name == property_name:
                return description
        return None

    def property_names(self) -> list[str]:
        return [description.property_name for description in self._items]


@dataclass(frozen=True)
class ClassDescription:
    """Description of one analyzed class."""

    class_name: str = ""
    class_name_with_outer_class: str = ""  # Nested classes joined by "."
    module_name: str = ""  # Module the class is defined in

    # Identity of the immediate superclass, None for interfaces and root-only bases
    super_type: TypeName | None = None

    getters_descriptions: DescriptionSet[GetterDescription] = field(default_factory=DescriptionSet)
    declared_getters_descriptions: DescriptionSet[GetterDescription] = field(default_factory=DescriptionSet)
    fields_descriptions: DescriptionSet[FieldDescription] = field(default_factory=DescriptionSet)
    declared_fields_descriptions: DescriptionSet[FieldDescription] = field(default_factory=DescriptionSet)

    @property
    def class_name_with_outer_class_not_separated_by_dots(self) -> str:
        return self.class_name_with_outer_class.replace(".", "")

    @property
    def type_name(self) -> TypeName:
        return TypeName(self.class_name_with_outer_class, self.module_name)

    @property
    def fully_qualified_name(self) -> str:
        return self.type_name.qualified_name

    def __str__(self) -> str:
        return f"ClassDescription[{self.fully_qualified_name}]"
