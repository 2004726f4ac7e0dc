"""
Assertions pipeline.

1. Discovery: import the targets and collect their classes
2. Description: convert each class to a ClassDescription
3. Generation: render assertion modules with jinja2 templates
4. Formatting: optional ruff post-processing
5. Output: atomic writes into the output package
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..description import ClassDescription, ClassToClassDescriptionConverter
from .config import GeneratorConfig, OutputMode
from .discovery import discover_classes
from .formatters import Formatter, RuffFormatter
from .generator import AssertionGenerator, GeneratedFile
from .writer import AtomicWriter, GenerationError, write_output

logger = logging.getLogger(__name__)

PACKAGE_MARKER = "__init__.py"


class AssertionsPipeline:
    """Generates assertion modules for the classes of modules and packages."""

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        converter: ClassToClassDescriptionConverter | None = None,
        formatter: Formatter | None = None,
    ):
        self.config = config or GeneratorConfig()
        self.converter = converter or ClassToClassDescriptionConverter()
        self.generator = AssertionGenerator(self.config)
        self.formatter = formatter or RuffFormatter()
        self.writer = AtomicWriter()

    def describe(self, classes: list[type]) -> list[ClassDescription]:
        return [self.converter.convert(cls) for cls in classes]

    def generate(self, targets: list[str]) -> list[GeneratedFile]:
        """Discover, describe and render without writing anything."""
        classes = discover_classes(targets, self.config.include_patterns, self.config.exclude_patterns)
        files = self.generator.generate(self.describe(classes))
        if self.config.formatter.enabled:
            files = [
                GeneratedFile(f.file_name, self.formatter.format(f.content, self.config.formatter, f.file_name))
                for f in files
            ]
        return files

    def run(self, targets: list[str], output_dir: str | Path) -> list[Path]:
        """
        Generate assertion modules into output_dir.

        The output directory is made a package so generated modules can
        import each other relatively.

        Returns:
            Paths of the files written

        Raises:
            ClassDiscoveryError: If a target cannot be resolved
            GenerationError: If generated code is invalid or an output file conflicts
        """
        output_dir = Path(output_dir)
        files = self.generate(targets)
        self._check_conflicts(output_dir, files)

        written = []
        for generated in files:
            path = output_dir / generated.file_name
            if write_output(path, generated.content, self.config.output, self.writer):
                written.append(path)

        package_marker = output_dir / PACKAGE_MARKER
        if files and not package_marker.exists():
            package_marker.write_text("", encoding="utf-8")
            written.append(package_marker)

        logger.info("Generated %d files in %s", len(written), output_dir)
        return written

    def _check_conflicts(self, output_dir: Path, files: list[GeneratedFile]) -> None:
        """Fail before writing anything when an output file may not be replaced."""
        if self.config.output.mode != OutputMode.ERROR_IF_EXISTS:
            return
        existing = [str(output_dir / f.file_name) for f in files if (output_dir / f.file_name).exists()]
        if existing:
            raise GenerationError(
                f"Output file already exists: {', '.join(existing)}. Use force mode to overwrite."
            )
