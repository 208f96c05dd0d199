"""Discovery of selectable items (files) in the scan directory."""

from pathlib import Path
from typing import Iterable

from .config import Config


def is_item(path: Path, extensions: Iterable[str]) -> bool:
    """Check whether a path has one of the configured extensions.

    An empty extension list accepts every file.
    """
    extensions = {ext.lower() for ext in extensions}
    if not extensions:
        return True
    return path.suffix.lower() in extensions


def _is_hidden(path: Path, root: Path) -> bool:
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        parts = path.parts
    return any(part.startswith(".") for part in parts)


def find_items(
    directory: Path,
    extensions: Iterable[str] = (),
    recursive: bool = True,
) -> list[Path]:
    """Find item files under a directory, sorted by path.

    Hidden files and anything inside hidden directories are skipped.
    """
    if not directory.exists():
        return []

    extensions = list(extensions)
    pattern = directory.rglob("*") if recursive else directory.glob("*")

    items = []
    try:
        for path in pattern:
            if _is_hidden(path, directory):
                continue
            if path.is_file() and is_item(path, extensions):
                items.append(path)
    except PermissionError:
        pass

    return sorted(items)


def scan_items(config: Config) -> list[Path]:
    """Find the items for the configured scan directory."""
    return find_items(
        config.scan_directory,
        config.items.extensions,
        recursive=config.items.recursive,
    )
