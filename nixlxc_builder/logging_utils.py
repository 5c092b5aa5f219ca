from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple

DEFAULT_LOG_PATH = "logs/nixlxc-builder.log"
FALLBACK_LOG_NAME = "nixlxc-builder.log"

_FORMAT = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)


def _open_log_file(candidates: Sequence[str]) -> Tuple[Optional[logging.Handler], Optional[str]]:
    for path in candidates:
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            return logging.FileHandler(path), path
        except OSError:
            continue
    return None, None


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Attach a build log file (and the console) to the root logger.

    Tries ``log_path``, then ./nixlxc-builder.log. When neither can be opened
    the build logs to the console only and None is returned. Calling this
    again keeps the first setup.
    """

    root = logging.getLogger()
    root.setLevel(level)

    if getattr(root, "_nixlxc_configured", False):
        return getattr(root, "_nixlxc_log_path", None)

    file_handler, chosen = _open_log_file([log_path, str(Path.cwd() / FALLBACK_LOG_NAME)])
    handlers: list[logging.Handler] = [file_handler] if file_handler is not None else []
    # Without a log file the console is the only record of the run.
    if also_console or file_handler is None:
        handlers.append(logging.StreamHandler())

    for h in handlers:
        h.setFormatter(_FORMAT)
        root.addHandler(h)

    setattr(root, "_nixlxc_configured", True)
    setattr(root, "_nixlxc_log_path", chosen)

    log = logging.getLogger(__name__)
    if chosen is None:
        log.warning("No writable log file (requested %s); logging to console only", log_path)
    else:
        log.info("Logging to %s (requested %s)", chosen, log_path)
    return chosen
