"""
Annotation reading and evaluation.

Annotations are read per owner (class or function) and evaluated lazily so
that string annotations (``from __future__ import annotations``) and forward
references resolve in the namespace they were written in. An annotation that
cannot be evaluated is returned unchanged as a string.
"""

from __future__ import annotations

import inspect
import logging
import sys
import types
from typing import Any

logger = logging.getLogger(__name__)

_HOLDER_NAME = "assertions_generator.annotation"
_HOLDER_KEY = "annotation"


def raw_annotations(owner: Any) -> dict[str, Any]:
    """Return the annotations declared directly on a class or function."""
    try:
        return dict(inspect.get_annotations(owner))
    except NameError:
        # Deferred annotations (PEP 649) referencing undefined names
        if sys.version_info < (3, 14):
            raise
        import annotationlib

        return dict(annotationlib.get_annotations(owner, format=annotationlib.Format.STRING))


def class_namespace(cls: type) -> tuple[dict[str, Any], dict[str, Any]]:
    """Globals and locals used to evaluate annotations written in a class body."""
    module = sys.modules.get(getattr(cls, "__module__", ""), None)
    globalns = dict(vars(module)) if module is not None else {}
    localns = dict(vars(cls))
    localns.setdefault(cls.__name__, cls)
    return globalns, localns


def function_namespace(function: Any, owner: type) -> tuple[dict[str, Any], dict[str, Any]]:
    """Globals and locals used to evaluate annotations of a method defined on ``owner``."""
    globalns = getattr(function, "__globals__", None)
    if globalns is None:
        globalns, _ = class_namespace(owner)
    _, localns = class_namespace(owner)
    return globalns, localns


def evaluate_annotation(annotation: Any, globalns: dict[str, Any], localns: dict[str, Any]) -> Any:
    """Evaluate a string annotation, returning it unchanged when it cannot be resolved."""
    if not isinstance(annotation, str):
        return annotation
    # A one-entry annotations holder lets inspect evaluate each annotation on its own
    holder = types.ModuleType(_HOLDER_NAME)
    holder.__annotations__ = {_HOLDER_KEY: annotation}
    try:
        return inspect.get_annotations(holder, globals=globalns, locals=localns, eval_str=True)[_HOLDER_KEY]
    except Exception as e:  # noqa: BLE001
        logger.debug("Could not evaluate annotation %r: %s", annotation, e)
        return annotation
