"""
Ruff formatter for generated assertion modules.
"""

from __future__ import annotations

import logging
import subprocess

from ..config import FormatterConfig
from .base import Formatter

logger = logging.getLogger(__name__)


class RuffFormatter(Formatter):
    """Runs ``ruff format`` on generated modules through stdin."""

    name = "ruff"

    def __init__(self, executable: str = "ruff"):
        self.executable = executable
        self._version: str | None = None
        self._checked = False

    def is_available(self) -> bool:
        if not self._checked:
            self._checked = True
            try:
                completed = subprocess.run([self.executable, "--version"], capture_output=True, text=True, timeout=5)
            except (OSError, subprocess.SubprocessError):
                completed = None
            if completed is not None and completed.returncode == 0:
                self._version = completed.stdout.strip()
                logger.debug("Formatting generated modules with %s", self._version)
            else:
                logger.warning("%s is not available, generated modules are left unformatted", self.executable)
        return self._version is not None

    def format(self, code: str, config: FormatterConfig, file_name: str = "assertions.py") -> str:
        if not self.is_available():
            return code

        # The stdin file name lets ruff pick up the project configuration of the output package
        command = [self.executable, "format", "--stdin-filename", file_name]
        if config.line_length:
            command += ["--line-length", str(config.line_length)]
        if config.target_version:
            command += ["--target-version", config.target_version]
        command.append("-")

        try:
            completed = subprocess.run(command, input=code, capture_output=True, text=True, timeout=30)
        except subprocess.SubprocessError as e:
            logger.warning("ruff could not format %s: %s", file_name, e)
            return code

        if completed.returncode != 0:
            logger.warning("ruff could not format %s: %s", file_name, completed.stderr.strip())
            return code
        return completed.stdout
