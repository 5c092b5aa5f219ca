from __future__ import annotations

from ..lib.nix import install_nixos_generators
from ..pipeline import BuildCtx


class InstallGeneratorsStep:
    step_id = "80_install_generators"
    fatal = True

    def run(self, ctx: BuildCtx) -> None:
        install_nixos_generators(ctx.work_dir, runner=ctx.runner)
