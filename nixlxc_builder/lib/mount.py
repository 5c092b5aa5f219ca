from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..errors import CommandError, MountError
from .command import Runner, run_cmd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KernelFs:
    fstype: str
    source: str
    target: str  # relative to the staged root
    options: Optional[str] = None


# Mount order; dev/pts is nested under dev so teardown must run backwards.
KERNEL_FILESYSTEMS: Sequence[KernelFs] = (
    KernelFs("devtmpfs", "devtmpfs", "dev"),
    KernelFs("devpts", "devpts", "dev/pts", "gid=5"),
    KernelFs("proc", "proc", "proc"),
    KernelFs("sysfs", "sysfs", "sys"),
)


class MountHandle:
    """One active kernel filesystem mount owned by the build run.

    release() lazily unmounts (umount -l) so it completes even when the
    mountpoint is busy. It never raises and only acts once.
    """

    def __init__(self, fs: KernelFs, target: Path, *, runner: Runner = run_cmd) -> None:
        self.fs = fs
        self.target = target
        self._runner = runner
        self.released = False

    def __repr__(self) -> str:
        return f"MountHandle({self.fs.fstype} at {self.target}, released={self.released})"

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        try:
            r = self._runner(["umount", "-l", str(self.target)], check=False)
        except CommandError as e:
            logger.warning("Unable to unmount %s: %s", self.target, e)
            return
        if r.returncode != 0:
            logger.warning("umount -l %s exited %d: %s", self.target, r.returncode, r.stderr.strip())
        else:
            logger.info("Unmounted %s", self.target)


def mount_kernel_filesystems(root: Union[str, Path], *, runner: Runner = run_cmd) -> List[MountHandle]:
    """Mount devtmpfs, devpts, proc and sysfs under ``root``, in that order.

    On failure MountError.mounted carries the handles already acquired; the
    caller must release them.
    """

    root = Path(root)
    mounts: List[MountHandle] = []

    for fs in KERNEL_FILESYSTEMS:
        target = root / fs.target
        argv = ["mount", "-t", fs.fstype]
        if fs.options:
            argv += ["-o", fs.options]
        argv += [fs.source, str(target)]
        try:
            runner(argv)
        except CommandError as e:
            raise MountError(
                f"Failed to mount {fs.fstype} filesystem at `{target}`: {e}",
                fstype=fs.fstype,
                mounted=mounts,
            ) from e
        mounts.append(MountHandle(fs, target, runner=runner))

    return mounts


def release_all(mounts: List[MountHandle]) -> None:
    """Release handles in reverse acquisition order, emptying ``mounts``."""

    while mounts:
        mounts.pop().release()
