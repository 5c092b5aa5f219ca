from __future__ import annotations

import logging
from pathlib import Path

from ..errors import FilesystemError

logger = logging.getLogger(__name__)


def prepare_work_dir(path: str | Path) -> Path:
    """Ensure ``path`` exists, is a directory and is empty.

    Missing directories (and parents) are created. An existing non-empty
    directory is rejected, never cleared.
    """

    wd = Path(path)

    if not wd.exists():
        try:
            wd.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(
                f"Unable to create working directory `{wd}`: {e}", path=str(wd)
            ) from e
        logger.info("Created working directory %s", wd)

    if not wd.is_dir():
        raise FilesystemError(f"`{wd}` is not a directory", path=str(wd), kind="not-a-directory")

    try:
        has_entries = any(wd.iterdir())
    except OSError as e:
        raise FilesystemError(f"Unable to access directory `{wd}`: {e}", path=str(wd)) from e

    if has_entries:
        raise FilesystemError(
            f"Working directory `{wd}` is not empty", path=str(wd), kind="directory-not-empty"
        )

    return wd
