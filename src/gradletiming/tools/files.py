"""Directory listing and file reading for build-log directories."""

from pathlib import Path

from gradletiming.core.log import logger


def list_files(path: str | Path) -> list[Path]:
    """List the direct children of a directory.

    Files and subdirectories are both returned, in whatever order
    the operating system yields them. Nothing is filtered and
    nothing is descended into.

    Args:
        path: Directory to list. Not validated.

    Returns:
        Child paths, or an empty list if path cannot be listed
        (missing, not a directory, unreadable, a symlink loop)
    """
    directory = Path(path)
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        logger.debug(
            "Nothing to list", directory=str(directory), reason=str(e)
        )
        return []

    logger.debug(
        "Directory listed", directory=str(directory), entries=len(entries)
    )
    return entries


def read_content(path: Path, encoding: str = "utf-8") -> str | None:
    """Read a whole file as text.

    Args:
        path: File to read
        encoding: Text encoding to decode with

    Returns:
        File content, or None if the file could not be opened,
        read or decoded
    """
    try:
        with open(path, encoding=encoding) as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warn(
            "Cannot read file, skipping",
            file=str(path),
            error=str(e),
        )
        return None


def read_contents(paths: list[Path], encoding: str = "utf-8"):
    """Yield the content of each path in turn (None if unreadable).

    Files are opened one at a time; each is closed before the
    next is opened.
    """
    for path in paths:
        yield read_content(path, encoding)
