"""Assertions Generator

Describes Python classes from their runtime metadata (accessors, public
fields, types, declared exceptions, inheritance) and generates fluent
assertion classes for them.
"""

__version__ = "1.0.0"

from .description import (
    ClassDescription,
    ClassDescriptionError,
    ClassToClassDescriptionConverter,
    FieldDescription,
    GetterDescription,
    TypeName,
    convert_to_class_description,
)
from .markers import SKIP_GENERATION, raises, skip_generation
from .pipeline import AssertionGenerator, AssertionsPipeline, GeneratorConfig

__all__ = [
    "ClassToClassDescriptionConverter",
    "ClassDescription",
    "ClassDescriptionError",
    "GetterDescription",
    "FieldDescription",
    "TypeName",
    "convert_to_class_description",
    "SKIP_GENERATION",
    "skip_generation",
    "raises",
    "AssertionGenerator",
    "AssertionsPipeline",
    "GeneratorConfig",
]
