from __future__ import annotations

from ..lib.nix import install_nix
from ..pipeline import BuildCtx


class InstallNixStep:
    step_id = "70_install_nix"
    fatal = True

    def run(self, ctx: BuildCtx) -> None:
        install_nix(
            ctx.work_dir,
            repositories=ctx.cfg.repositories,
            channel=ctx.cfg.nix_channel,
            runner=ctx.runner,
        )
