# ============================================================================
# ENTITY DISCOVERY
# ============================================================================
# STATUS: Core - Locate entity classes on disk
# PURPOSE: Import modules under configured directories, collect entity classes
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: find_all_entities, load_module, entities_in_module
# DEPENDENCIES: importlib
# ============================================================================
"""
Entity Discovery

Walks each configured directory for *.py files, imports each file by
path and collects AbstractEntity subclasses defined in it.

Design:
- Files are visited in sorted order, classes in definition order
- Classes without __sql_table__ are treated as abstract bases and skipped
- A file that fails to import is logged and skipped
- Re-discovery reuses modules already in sys.modules
"""

import hashlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Iterable, Iterator, List, Type, Union

from core.logging import ComponentType, get_logger
from core.models.entity import AbstractEntity

logger = get_logger(__name__, ComponentType.DISCOVERY)

MODULE_PREFIX = "_discovered_entities"


def _module_name(path: Path) -> str:
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    return f"{MODULE_PREFIX}_{path.stem}_{digest}"


def iter_python_files(directory: Union[str, Path]) -> Iterator[Path]:
    """Yield *.py files under directory, sorted, skipping private/cache files."""
    root = Path(directory)
    if root.is_file():
        if root.suffix == ".py":
            yield root.resolve()
        return
    if not root.is_dir():
        logger.warning(f"Entity directory does not exist: {root}")
        return

    for path in sorted(root.rglob("*.py")):
        if "__pycache__" in path.parts:
            continue
        if path.name.startswith("_") and path.name != "__init__.py":
            continue
        yield path.resolve()


def load_module(path: Path) -> ModuleType:
    """
    Import a Python file by path.

    The module is registered in sys.modules so Pydantic can resolve
    annotations that refer back to it.
    """
    name = _module_name(path)
    if name in sys.modules:
        return sys.modules[name]

    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load module from {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module


def entities_in_module(module: ModuleType) -> List[Type[AbstractEntity]]:
    """Concrete entity classes defined (not imported) in module, in definition order."""
    result = []
    for obj in vars(module).values():
        if not isinstance(obj, type) or obj is AbstractEntity:
            continue
        if not issubclass(obj, AbstractEntity):
            continue
        if obj.__module__ != module.__name__:
            continue
        if not getattr(obj, "__sql_table__", None):
            logger.debug(f"Skipping abstract entity {obj.__name__}")
            continue
        result.append(obj)
    return result


def find_all_entities(entity_dirs: Iterable[Union[str, Path]]) -> List[Type[AbstractEntity]]:
    """
    Discover entity classes under the given directories.

    Args:
        entity_dirs: Directories (or single files) to scan

    Returns:
        Entity classes in discovery order, without duplicates
    """
    result: List[Type[AbstractEntity]] = []
    seen = set()

    for directory in entity_dirs:
        for path in iter_python_files(directory):
            try:
                module = load_module(path)
            except Exception as e:
                logger.warning(f"Failed to import {path}: {e}")
                continue

            for entity in entities_in_module(module):
                if entity in seen:
                    continue
                seen.add(entity)
                result.append(entity)

    logger.info(f"Discovered {len(result)} entities")
    return result


__all__ = ["find_all_entities", "load_module", "entities_in_module", "iter_python_files"]
