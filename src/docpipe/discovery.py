"""Source file discovery."""

import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def discover_files(root_path: Path, extensions: Iterable[str]) -> list[str]:
    """List files beneath a root path in a stable order.

    Args:
        root_path: Project root directory.
        extensions: Accepted suffixes such as ``".py"``.

    Returns:
        Sorted project-relative POSIX paths of matching regular files.
    """
    suffixes = {
        extension if extension.startswith(".") else f".{extension}"
        for extension in extensions
    }
    paths = sorted(
        file_path.relative_to(root_path).as_posix()
        for file_path in root_path.rglob("*")
        if file_path.is_file() and file_path.suffix in suffixes
    )
    logger.debug(f"Discovered files (root_path={root_path} count={len(paths)})")
    return paths
