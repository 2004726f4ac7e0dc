"""
Configuration for the assertions generator pipeline.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when an output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite
    SKIP_EXISTING = "skip"  # Keep the existing file untouched


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to parse generated code before writing
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class FormatterConfig:
    """Configuration for post-processing formatters."""

    # Whether formatting is enabled
    enabled: bool = False

    # Line length for the formatter
    line_length: int = 100

    # Python version target (e.g., "py312", "py313")
    target_version: str = "py312"


@dataclass
class GeneratorConfig:
    """Configuration options for assertion generation."""

    # Generated assertion classes extend the assertion class of their super type
    hierarchical: bool = False

    # Generate the module exposing assert_that()
    generate_entry_point: bool = True
    entry_point_module: str = "assertions"

    # Regular expressions matched against fully qualified class names (empty = all)
    include_patterns: list[str] = field(default_factory=list)
    exclude_patterns: list[str] = field(default_factory=list)

    # Add generation comment at top of files
    add_generation_comment: bool = True

    # Directory with templates overriding the bundled ones (same file names)
    templates_dir: str = ""

    formatter: FormatterConfig = field(default_factory=FormatterConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary."""
        config = GeneratorConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    @staticmethod
    def from_file(path: str | Path) -> GeneratorConfig:
        """Load a config from a JSON file."""
        with open(path, encoding="utf-8") as f:
            return GeneratorConfig.from_dict(json.load(f))

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "hierarchical": self.hierarchical,
            "generate_entry_point": self.generate_entry_point,
            "entry_point_module": self.entry_point_module,
            "include_patterns": self.include_patterns,
            "exclude_patterns": self.exclude_patterns,
            "add_generation_comment": self.add_generation_comment,
            "templates_dir": self.templates_dir,
            "formatter": {
                "enabled": self.formatter.enabled,
                "line_length": self.formatter.line_length,
                "target_version": self.formatter.target_version,
            },
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
