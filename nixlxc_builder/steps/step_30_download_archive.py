from __future__ import annotations

import logging

from ..errors import BuildError
from ..lib.alpine import download_archive
from ..pipeline import BuildCtx

logger = logging.getLogger(__name__)


class DownloadArchiveStep:
    step_id = "30_download_archive"
    fatal = True

    def run(self, ctx: BuildCtx) -> None:
        if ctx.entry is None:
            raise BuildError("release entry missing; run 25_select_entry first")
        ctx.bytes_written = download_archive(
            ctx.client, ctx.arch, ctx.entry, ctx.archive_path, base_url=ctx.cfg.base_url
        )
        logger.info("`%s` was downloaded (%d bytes)", ctx.archive_path, ctx.bytes_written)
