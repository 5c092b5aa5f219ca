from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from ..errors import CommandError, ExtractionError
from .command import Runner, run_cmd

logger = logging.getLogger(__name__)


def extract_archive(archive: Union[str, Path], *, runner: Runner = run_cmd) -> Path:
    """Unpack ``archive`` into its parent directory.

    Permissions and special files are preserved (tar -p), which the
    staged root needs to be usable.
    """

    archive = Path(archive)
    dest = archive.parent
    try:
        runner(["tar", "-xpf", str(archive), "-C", str(dest)])
    except CommandError as e:
        raise ExtractionError(f"Unable to extract `{archive}` into `{dest}`: {e}") from e
    logger.info("Extracted %s into %s", archive, dest)
    return dest
