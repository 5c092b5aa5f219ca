from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .build_config import BuildConfig
from .build_state import mark_step, record_error
from .errors import BuildError, StepFailedError
from .lib.alpine import ReleaseEntry, Transport
from .lib.arch import Arch
from .lib.command import Runner, run_cmd
from .lib.extract import extract_archive
from .lib.mount import MountHandle

logger = logging.getLogger(__name__)


@dataclass
class BuildCtx:
    """Everything one build run reads and produces.

    Steps fill in the later fields as the run progresses.
    """

    cfg: BuildConfig
    arch: Arch
    client: Transport
    runner: Runner = run_cmd
    extractor: Callable[[Path], Any] = extract_archive

    manifest_text: Optional[str] = None
    entry: Optional[ReleaseEntry] = None
    bytes_written: Optional[int] = None
    mounts: List[MountHandle] = field(default_factory=list)
    # Set by an image-generation hook; reported at the end of the run.
    artifact_path: Optional[str] = None

    @property
    def work_dir(self) -> Path:
        return Path(self.cfg.work_dir)

    @property
    def archive_path(self) -> Path:
        return self.work_dir / self.cfg.archive_name


class Step(Protocol):
    """A single forward-only step.

    fatal=False steps log their failure and let the run continue.
    """

    step_id: str
    fatal: bool

    def run(self, ctx: BuildCtx) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]
    warnings: List[str]


def run_pipeline(*, ctx: BuildCtx, steps: Sequence[Step], state: Dict[str, Any]) -> PipelineResult:
    """Run steps in order; the first fatal failure stops the run."""

    ran: List[str] = []
    warnings: List[str] = []

    for step in steps:
        state["current_step"] = step.step_id
        logger.info("Running step %s", step.step_id)
        try:
            step.run(ctx)
        except BuildError as e:
            record_error(state, step.step_id, e)
            if not step.fatal:
                logger.warning("Step %s failed (non-fatal): %s", step.step_id, e)
                mark_step(state, step.step_id, "warning", str(e))
                warnings.append(step.step_id)
                continue
            logger.error("Step %s failed: %s", step.step_id, e)
            mark_step(state, step.step_id, "failed", str(e))
            raise StepFailedError(step.step_id, e) from e

        logger.info("Step %s OK", step.step_id)
        mark_step(state, step.step_id, "ok")
        ran.append(step.step_id)

    state["current_step"] = None
    return PipelineResult(ran_steps=ran, warnings=warnings)
