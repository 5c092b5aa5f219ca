from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence, Union

from .command import CmdResult, Runner, fmt_argv, run_cmd

logger = logging.getLogger(__name__)

ENV_LAUNCHER = "/usr/bin/env"
CHROOT_ENV = ("TMPDIR=/tmp",)


def chroot_argv(target_root: Union[str, Path], argv: Sequence[str]) -> list[str]:
    return ["chroot", str(target_root), ENV_LAUNCHER, *CHROOT_ENV, *argv]


def chroot_cmd(target_root: Union[str, Path], argv: Sequence[str], *, runner: Runner = run_cmd) -> CmdResult:
    """Run a command inside target root.

    A non-zero exit raises CommandError with both captured streams. No
    retries: package operations are not safe to repeat blindly.
    """

    r = runner(chroot_argv(target_root, argv))
    logger.info("chroot %s\n= stdout:\n%s\n= stderr:\n%s", fmt_argv(argv), r.stdout, r.stderr)
    return r
