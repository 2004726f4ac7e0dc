"""
Structured type references.

A TypeName is the immutable identity of a type as it appears in a
description. Rendering it relative to a reference module gives the display
name used in generated code.
"""

from __future__ import annotations

import re
import types
import typing
from collections.abc import Iterator
from dataclasses import dataclass

# Modules whose names never need qualification in generated code
UNQUALIFIED_MODULES = {"builtins"}

_LOCALS_SCOPE = "<locals>."
_NON_IDENTIFIER_RE = re.compile(r"[^0-9a-zA-Z_]+")

ANONYMOUS_CLASS_NAME = "AnonymousClass"


def _sanitize_identifier(part: str) -> str:
    text = _NON_IDENTIFIER_RE.sub("_", part).strip("_")
    if text and text[0].isdigit():
        text = f"_{text}"
    return text


def nested_class_name(cls: type) -> str:
    """Return the dot-joined nesting name of a class.

    Function scopes (``<locals>``) are dropped so a class defined inside a
    function is named as if it were top-level. Parts that are not valid
    identifiers are sanitized.
    """
    qualname = getattr(cls, "__qualname__", None) or getattr(cls, "__name__", "")
    if _LOCALS_SCOPE in qualname:
        qualname = qualname.rsplit(_LOCALS_SCOPE, 1)[1]
    parts = [_sanitize_identifier(part) for part in qualname.split(".")]
    parts = [part for part in parts if part]
    return ".".join(parts) or ANONYMOUS_CLASS_NAME


def module_name_of(obj: object) -> str:
    """Return the module an object is defined in, ``__main__`` when unknown."""
    module = getattr(obj, "__module__", None)
    return module if isinstance(module, str) and module else "__main__"


@dataclass(frozen=True)
class TypeName:
    """An immutable, structured type reference."""

    name: str  # Qualified name inside the module (e.g., "Outer.Inner")
    module: str | None = None  # None for names that never need an import
    args: tuple[TypeName, ...] = ()
    variadic: bool = False  # tuple[T, ...]
    is_union: bool = False

    @staticmethod
    def of(annotation: object) -> TypeName:
        """Build a TypeName from an evaluated annotation.

        Never raises: anything that cannot be taken apart is kept as its
        textual representation.
        """
        if annotation is None or annotation is type(None):
            return NONE_TYPE_NAME
        if annotation is typing.Any:
            return ANY_TYPE_NAME
        if annotation is Ellipsis:
            return TypeName("...")
        if isinstance(annotation, str):
            return TypeName(annotation)
        if isinstance(annotation, typing.ForwardRef):
            return TypeName(annotation.__forward_arg__)
        if isinstance(annotation, typing.TypeVar):
            bound = annotation.__bound__
            return TypeName.of(bound) if bound is not None else OBJECT_TYPE_NAME

        origin = typing.get_origin(annotation)
        args = typing.get_args(annotation)

        if origin is typing.Annotated:
            return TypeName.of(args[0])
        if origin is typing.Union or origin is types.UnionType:
            return TypeName("Union", args=tuple(TypeName.of(arg) for arg in args), is_union=True)
        if origin is typing.Literal:
            return TypeName("Literal", "typing", args=tuple(TypeName(repr(arg)) for arg in args))
        if isinstance(origin, type):
            if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
                return TypeName.of_class(origin).with_args((TypeName.of(args[0]),), variadic=True)
            if any(isinstance(arg, list) for arg in args):
                # Callable[[...], R] and friends have no structured rendering
                return TypeName(_type_repr(annotation))
            return TypeName.of_class(origin).with_args(tuple(TypeName.of(arg) for arg in args))
        if isinstance(annotation, type):
            return TypeName.of_class(annotation)
        return TypeName(_type_repr(annotation))

    @staticmethod
    def of_class(cls: type) -> TypeName:
        """Identity of a class: its nesting name and module."""
        return TypeName(nested_class_name(cls), module_name_of(cls))

    def with_args(self, args: tuple[TypeName, ...], variadic: bool = False) -> TypeName:
        return TypeName(self.name, self.module, args, variadic, self.is_union)

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def qualified_name(self) -> str:
        if self.module is None or self.module in UNQUALIFIED_MODULES:
            return self.name
        return f"{self.module}.{self.name}"

    def display(self, relative_to: str | None = None) -> str:
        """Render the name as it should appear in code living in ``relative_to``."""
        if self.is_union:
            return " | ".join(arg.display(relative_to) for arg in self.args)
        base = self.name if self.module == relative_to else self.qualified_name
        if not self.args:
            return base
        rendered = [arg.display(relative_to) for arg in self.args]
        if self.variadic:
            rendered.append("...")
        return f"{base}[{', '.join(rendered)}]"

    def iter_references(self) -> Iterator[tuple[str, str]]:
        """Yield ``(module, top-level name)`` for every importable type referenced."""
        if self.module is not None and self.module not in UNQUALIFIED_MODULES and not self.is_union:
            yield self.module, self.name.split(".", 1)[0]
        for arg in self.args:
            yield from arg.iter_references()

    def __str__(self) -> str:
        return self.display()


def _type_repr(annotation: object) -> str:
    text = repr(annotation)
    # Drop the "<class '...'>" wrapper the interpreter uses for plain classes
    if text.startswith("<class '") and text.endswith("'>"):
        text = text[len("<class '") : -2]
    return text.replace("builtins.", "")


NONE_TYPE_NAME = TypeName("None")
OBJECT_TYPE_NAME = TypeName("object", "builtins")
ANY_TYPE_NAME = TypeName("Any", "typing")

