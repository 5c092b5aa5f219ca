from __future__ import annotations

from ..errors import BuildError
from ..lib.alpine import verify_size
from ..pipeline import BuildCtx


class VerifySizeStep:
    step_id = "35_verify_size"
    fatal = True

    def run(self, ctx: BuildCtx) -> None:
        if ctx.entry is None or ctx.bytes_written is None:
            raise BuildError("archive not downloaded; run 30_download_archive first")
        verify_size(ctx.bytes_written, ctx.entry)
