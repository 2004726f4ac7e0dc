"""
Pipeline - class discovery, assertion generation and output.

1. Phase 1 (Discovery): Import targets and collect their classes
2. Phase 2 (Description): Convert classes to ClassDescription values
3. Phase 3 (Generation): Render assertion modules from jinja2 templates
4. Phase 4 (Formatter): Optional post-processing with ruff
5. Phase 5 (Writer): Atomic writes with an existing-file policy
"""

from __future__ import annotations

from .config import FormatterConfig, GeneratorConfig, OutputConfig, OutputMode
from .discovery import ClassDiscoveryError, discover_classes
from .generator import AssertionGenerator, GeneratedFile
from .runner import AssertionsPipeline
from .writer import AtomicWriter, GenerationError

__all__ = [
    "AssertionGenerator",
    "AssertionsPipeline",
    "AtomicWriter",
    "ClassDiscoveryError",
    "FormatterConfig",
    "GeneratedFile",
    "GenerationError",
    "GeneratorConfig",
    "OutputConfig",
    "OutputMode",
    "discover_classes",
]
