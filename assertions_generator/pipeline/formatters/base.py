"""
Formatter interface for generated assertion modules.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import FormatterConfig


class Formatter(ABC):
    """Post-processes the source of one generated module.

    Formatting is best effort: a formatter that cannot run returns the code
    it was given.
    """

    name = ""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying tool can be run."""

    @abstractmethod
    def format(self, code: str, config: FormatterConfig, file_name: str = "assertions.py") -> str:
        """
        Format the source of a generated module.

        Args:
            code: Generated source
            config: Formatter configuration
            file_name: Name the module will be written to

        Returns:
            Formatted source, or code unchanged
        """
