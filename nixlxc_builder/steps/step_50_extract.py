from __future__ import annotations

from ..pipeline import BuildCtx


class ExtractStep:
    step_id = "50_extract"
    fatal = True

    def run(self, ctx: BuildCtx) -> None:
        ctx.extractor(ctx.archive_path)
