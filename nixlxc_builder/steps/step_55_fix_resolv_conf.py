from __future__ import annotations

import logging

from ..errors import FilesystemError
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class FixResolvConfStep:
    """Give the chroot a working resolver.

    Best effort: a failure here is logged and the build continues.
    """

    step_id = "55_fix_resolv_conf"
    fatal = False

    def run(self, ctx: BuildCtx) -> None:
        p = ctx.work_dir / "etc/resolv.conf"
        try:
            p.write_text(f"nameserver {ctx.cfg.nameserver}", encoding="utf-8")
        except OSError as e:
            raise FilesystemError(f"Unable to create `{p}` file: {e}", path=str(p)) from e
        logger.info("Wrote %s", p)
