from __future__ import annotations

import logging

from ..errors import MountError
from ..lib.mount import mount_kernel_filesystems
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class MountKernelFsStep:
    step_id = "60_mount_kernel_fs"
    fatal = True

    def run(self, ctx: BuildCtx) -> None:
        try:
            ctx.mounts.extend(mount_kernel_filesystems(ctx.work_dir, runner=ctx.runner))
        except MountError as e:
            # Hand partial mounts to the orchestrator for teardown.
            ctx.mounts.extend(e.mounted)
            raise
        logger.info("devtmpfs, devpts, procfs, sysfs were mounted under %s", ctx.work_dir)
