"""
Utility functions for the assertions generator.
"""

import re

# Regex pattern to split text into words, handling camelCase and acronym boundaries
_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens, dots) to spaces."""
    return text.replace("_", " ").replace("-", " ").replace(".", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(text)


def to_snake_case(text: str) -> str:
    """Convert PascalCase, camelCase or dotted text to snake_case.

    Examples:
        "firstName" -> "first_name"
        "FellowshipOfTheRing" -> "fellowship_of_the_ring"
        "HTTPServer" -> "http_server"
        "Outer.Inner" -> "outer_inner"
        "first_name" -> "first_name"

    Args:
        text: The text to convert

    Returns:
        snake_case string
    """
    if not text:
        return ""
    normalized = _normalize_separators(text)
    return "_".join(word.lower() for word in _split_into_words(normalized))


def lower_first(text: str) -> str:
    """Lower-case the first character only: "FirstName" -> "firstName"."""
    return text[:1].lower() + text[1:]
