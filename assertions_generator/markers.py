"""
Member tags read by the class description converter.

Tags are plain attributes set on functions, so tagging a class never changes
its behaviour:

    class Player:
        @skip_generation
        def get_secret(self) -> str: ...

        @raises(LookupError)
        def get_agent(self) -> Agent: ...

        nickname: Annotated[str, SKIP_GENERATION]
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar

SKIP_ATTRIBUTE = "__skip_assertion_generation__"
RAISES_ATTRIBUTE = "__assertion_generation_raises__"

M = TypeVar("M")


class SkipGeneration:
    """Marker excluding a field from assertion generation.

    Use the SKIP_GENERATION instance (or the class itself) as ``Annotated``
    metadata, or as a dataclass field metadata key set to True.
    """

    def __repr__(self) -> str:
        return "SKIP_GENERATION"


SKIP_GENERATION = SkipGeneration()


def _tag_target(member: Any) -> Any:
    # property objects have no __dict__, tag their getter instead
    if isinstance(member, property):
        return member.fget
    if isinstance(member, functools.cached_property):
        return member.func
    return getattr(member, "__func__", member)


def skip_generation(member: M) -> M:
    """Exclude a method or property from assertion generation."""
    setattr(_tag_target(member), SKIP_ATTRIBUTE, True)
    return member


def raises(*exception_types: type[BaseException]) -> Callable[[M], M]:
    """Declare the exceptions an accessor may raise, in order."""

    def decorator(member: M) -> M:
        setattr(_tag_target(member), RAISES_ATTRIBUTE, tuple(exception_types))
        return member

    return decorator


def is_skipped(member: Any) -> bool:
    return bool(getattr(_tag_target(member), SKIP_ATTRIBUTE, False))


def is_skip_marker(metadata: Any) -> bool:
    return metadata is SkipGeneration or isinstance(metadata, SkipGeneration)


def declared_raises(member: Any) -> tuple[type[BaseException], ...] | None:
    """Exceptions declared with ``raises``, or None when the member has no tag."""
    return getattr(_tag_target(member), RAISES_ATTRIBUTE, None)
