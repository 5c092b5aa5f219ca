from __future__ import annotations

import logging

from ..lib.workdir import prepare_work_dir
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class PrepareDirStep:
    step_id = "10_prepare_dir"
    fatal = True

    def run(self, ctx: BuildCtx) -> None:
        prepare_work_dir(ctx.work_dir)
        logger.info("`%s` is ready", ctx.work_dir)
