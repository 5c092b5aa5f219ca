from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_BUILD_STATE = "build/build_state.json"


def new_build_state() -> Dict[str, Any]:
    return {
        "current_step": None,
        "steps": {},
        "errors": [],
        "artifact_path": None,
    }


def mark_step(state: Dict[str, Any], step_id: str, status: str, detail: Optional[str] = None) -> None:
    entry: Dict[str, Any] = {"status": status}
    if detail:
        entry["detail"] = detail
    state.setdefault("steps", {})[step_id] = entry


def record_error(state: Dict[str, Any], step_id: Optional[str], error: BaseException) -> None:
    state.setdefault("errors", []).append(
        {"step": step_id, "type": type(error).__name__, "error": str(error)}
    )


def save_build_state(path: str, state: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(state, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    logger.debug("Build report written to %s", p)
