"""
Atomic file writer for generated assertion modules.

Ensures that file writes are atomic so an interrupted generation never
leaves a half-written module behind.
"""

from __future__ import annotations

import ast
import logging
import tempfile
from collections.abc import Callable
from pathlib import Path

from .config import OutputConfig, OutputMode

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised when generated code cannot be written.

    This can happen when:
    - The generated code is not valid Python
    - The output file exists and the output mode forbids overwriting it
    """


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def __init__(self, validate_python: Callable[[str], None] | None = None):
        """Initialize the atomic writer.

        Args:
            validate_python: Optional validation function for Python code
        """
        self._validate_python = validate_python or self._default_validate_python

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            validate: Whether to validate before finalizing

        Raises:
            GenerationError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self._validate_python(content)

            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

    @staticmethod
    def _default_validate_python(content: str) -> None:
        """Default Python validation.

        Raises:
            GenerationError: If the content does not parse
        """
        try:
            ast.parse(content)
        except SyntaxError as e:
            raise GenerationError(f"Generated Python code is not valid: {e}") from e


def write_output(path: Path, content: str, config: OutputConfig, writer: AtomicWriter | None = None) -> bool:
    """
    Write one generated module according to the output configuration.

    Returns:
        True if the file was written, False if an existing file was kept

    Raises:
        GenerationError: If the file exists in ERROR_IF_EXISTS mode or validation fails
    """
    if path.exists():
        if config.mode == OutputMode.ERROR_IF_EXISTS:
            raise GenerationError(f"Output file already exists: {path}. Use force mode to overwrite.")
        if config.mode == OutputMode.SKIP_EXISTING:
            logger.info("Keeping existing %s", path)
            return False

    writer = writer or AtomicWriter()
    if config.atomic_write:
        writer.write(path, content, validate=config.validate_before_write)
    else:
        if config.validate_before_write:
            writer._validate_python(content)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    logger.info("Wrote %s", path)
    return True
