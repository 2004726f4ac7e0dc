"""
Runtime support for generated assertion classes.

Every generated ``<Class>Assert`` extends AbstractAssert, directly or through
the assertion class of its super type.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic, Self, TypeVar

A = TypeVar("A")


class AbstractAssert(Generic[A]):
    """Fluent assertions on an actual value."""

    def __init__(self, actual: A):
        self.actual = actual
        self._description: str | None = None

    def described_as(self, description: str) -> Self:
        """Prefix failure messages with a description."""
        self._description = description
        return self

    def fail_with_message(self, message: str, *args: Any) -> None:
        text = message % args if args else message
        if self._description:
            text = f"[{self._description}] {text}"
        raise AssertionError(text)

    def is_not_none(self) -> Self:
        if self.actual is None:
            self.fail_with_message("Expecting actual not to be None")
        return self

    def is_equal_to(self, expected: object) -> Self:
        if self.actual != expected:
            self.fail_with_message("\nExpecting:\n  <%r>\nto be equal to:\n  <%r>", self.actual, expected)
        return self

    def is_instance_of(self, expected_type: type) -> Self:
        self.is_not_none()
        if not isinstance(self.actual, expected_type):
            self.fail_with_message(
                "\nExpecting:\n  <%r>\nto be an instance of:\n  <%s>\nbut was an instance of:\n  <%s>",
                self.actual,
                expected_type.__qualname__,
                type(self.actual).__qualname__,
            )
        return self

    # Helpers used by generated property assertions

    def _check_property(self, property_name: str, actual_value: object, expected: object) -> None:
        if actual_value != expected:
            self.fail_with_message(
                "\nExpecting %s of:\n  <%r>\nto be:\n  <%r>\nbut was:\n  <%r>",
                property_name,
                self.actual,
                expected,
                actual_value,
            )

    @staticmethod
    def _elements(actual_values: object) -> list[object]:
        # A single value (e.g., an enum member) is its own only element
        if isinstance(actual_values, Iterable) and not isinstance(actual_values, (str, bytes)):
            return list(actual_values)
        return [actual_values]

    def _check_contains(self, property_name: str, actual_values: object, values: tuple) -> None:
        if actual_values is None:
            self.fail_with_message("\nExpecting %s of:\n  <%r>\nnot to be None", property_name, self.actual)
        elements = self._elements(actual_values)
        missing = [value for value in values if value not in elements]
        if missing:
            self.fail_with_message(
                "\nExpecting %s of:\n  <%r>\nto contain:\n  <%r>\nbut could not find:\n  <%r>",
                property_name,
                self.actual,
                list(values),
                missing,
            )

    def _check_contains_only(self, property_name: str, actual_values: object, values: tuple) -> None:
        self._check_contains(property_name, actual_values, values)
        unexpected = [element for element in self._elements(actual_values) if element not in values]
        if unexpected:
            self.fail_with_message(
                "\nExpecting %s of:\n  <%r>\nto contain only:\n  <%r>\nbut the following elements were unexpected:\n  <%r>",
                property_name,
                self.actual,
                list(values),
                unexpected,
            )

    def _check_empty(self, property_name: str, actual_values: object) -> None:
        if actual_values is None:
            self.fail_with_message("\nExpecting %s of:\n  <%r>\nnot to be None", property_name, self.actual)
        elements = self._elements(actual_values)
        if elements:
            self.fail_with_message(
                "\nExpecting %s of:\n  <%r>\nto be empty but had:\n  <%r>", property_name, self.actual, elements
            )
