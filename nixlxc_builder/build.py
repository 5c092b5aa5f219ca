from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from .build_config import BuildConfig
from .build_state import DEFAULT_BUILD_STATE, new_build_state, save_build_state
from .lib.alpine import Transport
from .lib.command import Runner, run_cmd
from .lib.extract import extract_archive
from .lib.host import HostEnv, check_platform, resolve_arch
from .lib.http import HttpClient
from .lib.mount import release_all
from .pipeline import BuildCtx, Step, run_pipeline
from .steps import (
    DownloadArchiveStep,
    DownloadManifestStep,
    ExtractStep,
    FixResolvConfStep,
    InstallGeneratorsStep,
    InstallNixStep,
    MountKernelFsStep,
    PrepareDirStep,
    SelectEntryStep,
    VerifyChecksumStep,
    VerifySizeStep,
)

logger = logging.getLogger(__name__)

# Runs after the last step, while kernel filesystems are still mounted.
# May set ctx.artifact_path.
PostProvisionHook = Callable[[BuildCtx], None]


def build_steps() -> List[Step]:
    return [
        PrepareDirStep(),
        DownloadManifestStep(),
        SelectEntryStep(),
        DownloadArchiveStep(),
        VerifySizeStep(),
        VerifyChecksumStep(),
        ExtractStep(),
        FixResolvConfStep(),
        MountKernelFsStep(),
        InstallNixStep(),
        InstallGeneratorsStep(),
    ]


class HookStep:
    fatal = True

    def __init__(self, hook: PostProvisionHook) -> None:
        self.hook = hook
        self.step_id = f"hook:{getattr(hook, '__name__', type(hook).__name__)}"

    def run(self, ctx: BuildCtx) -> None:
        self.hook(ctx)


@dataclass(frozen=True)
class BuildResult:
    state: Dict[str, Any]
    artifact_path: Optional[str]


def init_build(
    cfg: BuildConfig,
    host: HostEnv,
    *,
    client: Optional[Transport] = None,
    runner: Runner = run_cmd,
) -> BuildCtx:
    """Check the host and assemble the context for one run."""

    check_platform(host)
    arch = resolve_arch(host)
    return BuildCtx(
        cfg=cfg,
        arch=arch,
        client=client or HttpClient(cfg.http),
        runner=runner,
        extractor=functools.partial(extract_archive, runner=runner),
    )


def run_build(
    ctx: BuildCtx,
    *,
    steps: Optional[Sequence[Step]] = None,
    post_provision: Sequence[PostProvisionHook] = (),
    state_path: Optional[str] = DEFAULT_BUILD_STATE,
) -> BuildResult:
    """Run every step, then the hooks, then unmount.

    Kernel filesystem mounts are released in reverse order on every exit
    path before this function returns or raises.
    """

    state = new_build_state()
    all_steps: List[Step] = list(build_steps() if steps is None else steps)
    all_steps += [HookStep(h) for h in post_provision]

    try:
        result = run_pipeline(ctx=ctx, steps=all_steps, state=state)
        if result.warnings:
            logger.warning("Build finished with warnings in: %s", ", ".join(result.warnings))
        state["artifact_path"] = ctx.artifact_path
        return BuildResult(state=state, artifact_path=ctx.artifact_path)
    finally:
        if ctx.mounts:
            logger.info("Unmounting %d kernel filesystems", len(ctx.mounts))
        release_all(ctx.mounts)
        if state_path:
            # The report must not mask the outcome of the run.
            try:
                save_build_state(state_path, state)
            except OSError as e:
                logger.warning("Unable to write build report %s: %s", state_path, e)
