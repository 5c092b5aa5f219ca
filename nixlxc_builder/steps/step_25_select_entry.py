from __future__ import annotations

from ..errors import BuildError
from ..lib.alpine import select_entry
from ..pipeline import BuildCtx


class SelectEntryStep:
    step_id = "25_select_entry"
    fatal = True

    def run(self, ctx: BuildCtx) -> None:
        if ctx.manifest_text is None:
            raise BuildError("release manifest missing; run 20_download_manifest first")
        ctx.entry = select_entry(ctx.manifest_text, ctx.cfg.flavor)
