from __future__ import annotations

from ..errors import BuildError
from ..lib.alpine import verify_checksum
from ..pipeline import BuildCtx


class VerifyChecksumStep:
    step_id = "40_verify_checksum"
    fatal = True

    def run(self, ctx: BuildCtx) -> None:
        if ctx.entry is None:
            raise BuildError("release entry missing; run 25_select_entry first")
        verify_checksum(ctx.archive_path, ctx.entry)
