"""
Class discovery.

Imports the modules and packages given as targets and collects the classes
they define. A target is a module name (``shop.models``), a package name
(walked recursively) or a single class (``shop.models:Order``).
"""

from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
import re
from types import ModuleType

logger = logging.getLogger(__name__)


class ClassDiscoveryError(Exception):
    """Raised when a target module or class cannot be found."""


def import_target_module(module_name: str) -> ModuleType:
    try:
        return importlib.import_module(module_name)
    except ImportError as e:
        raise ClassDiscoveryError(f"Cannot import module '{module_name}': {e}") from e


def classes_defined_in(module: ModuleType) -> list[type]:
    """Public classes defined in a module (not imported into it), in definition order."""
    return [
        member
        for name, member in vars(module).items()
        if inspect.isclass(member) and not name.startswith("_") and member.__module__ == module.__name__
    ]


def _iter_package_modules(package: ModuleType) -> list[ModuleType]:
    modules = [package]
    for module_info in pkgutil.walk_packages(package.__path__, prefix=f"{package.__name__}."):
        if module_info.name.rsplit(".", 1)[-1].startswith("_"):
            logger.debug("Skipping private module %s", module_info.name)
            continue
        modules.append(import_target_module(module_info.name))
    return modules


def discover_classes(
    targets: list[str],
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
) -> list[type]:
    """
    Collect the classes named by targets.

    Args:
        targets: Module names, package names or ``module:Class`` references
        include_patterns: Regular expressions a fully qualified class name must match (any)
        exclude_patterns: Regular expressions excluding fully qualified class names

    Returns:
        The classes found, without duplicates, in target order

    Raises:
        ClassDiscoveryError: If a target cannot be imported or resolved
    """
    includes = [re.compile(pattern) for pattern in include_patterns or []]
    excludes = [re.compile(pattern) for pattern in exclude_patterns or []]

    found: list[type] = []
    for target in targets:
        module_name, _, class_path = target.partition(":")
        module = import_target_module(module_name)

        if class_path:
            candidates = [_resolve_class(module, class_path, target)]
        elif hasattr(module, "__path__"):
            candidates = [cls for sub_module in _iter_package_modules(module) for cls in classes_defined_in(sub_module)]
        else:
            candidates = classes_defined_in(module)

        for cls in candidates:
            qualified_name = f"{cls.__module__}.{cls.__qualname__}"
            if includes and not any(pattern.search(qualified_name) for pattern in includes):
                continue
            if any(pattern.search(qualified_name) for pattern in excludes):
                logger.debug("Excluding %s", qualified_name)
                continue
            if cls not in found:
                found.append(cls)

    logger.info("Discovered %d classes from %d targets", len(found), len(targets))
    return found


def _resolve_class(module: ModuleType, class_path: str, target: str) -> type:
    obj: object = module
    for part in class_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ClassDiscoveryError(f"Cannot find '{class_path}' in target '{target}'") from e
    if not inspect.isclass(obj):
        raise ClassDiscoveryError(f"Target '{target}' is not a class")
    return obj
