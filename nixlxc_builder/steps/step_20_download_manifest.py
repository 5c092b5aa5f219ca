from __future__ import annotations

from ..lib.alpine import fetch_manifest
from ..pipeline import BuildCtx


class DownloadManifestStep:
    step_id = "20_download_manifest"
    fatal = True

    def run(self, ctx: BuildCtx) -> None:
        ctx.manifest_text = fetch_manifest(ctx.client, ctx.arch, base_url=ctx.cfg.base_url)
