from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from .build import init_build, run_build
from .build_config import DEFAULT_BUILD_CONFIG, BuildConfig, load_build_config
from .build_state import DEFAULT_BUILD_STATE
from .errors import BuildError
from .lib.host import HostEnv
from .logging_utils import DEFAULT_LOG_PATH, configure_logging

logger = logging.getLogger(__name__)


def _with_work_dir(cfg: BuildConfig, work_dir: Optional[str]) -> BuildConfig:
    if not work_dir:
        return cfg
    raw = dict(cfg.raw)
    raw["paths"] = dict(raw.get("paths") or {}, work_dir=work_dir)
    return BuildConfig(raw=raw)


def main(argv: Optional[list[str]] = None, *, host: Optional[HostEnv] = None) -> int:
    p = argparse.ArgumentParser(
        prog="nixlxc-build",
        description="Stage an Alpine root filesystem and install Nix and nixos-generators into it.",
    )
    p.add_argument("--config", default=DEFAULT_BUILD_CONFIG, help="YAML build config (optional)")
    p.add_argument("--work-dir", default=None, help="Staging directory; must be empty or absent")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to build log")
    p.add_argument("--state", default=DEFAULT_BUILD_STATE, help="Path to JSON build report")
    p.add_argument("-v", "--verbose", action="store_true", help="Log command output")

    args = p.parse_args(argv)

    configure_logging(log_path=args.log, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        cfg = _with_work_dir(load_build_config(args.config), args.work_dir)
        ctx = init_build(cfg, host or HostEnv.detect())
    except BuildError as e:
        print(f"Failed to initialize the application: {e}", file=sys.stderr)
        return 1

    try:
        result = run_build(ctx, state_path=args.state)
    except BuildError as e:
        print(str(e), file=sys.stderr)
        return 1

    if result.artifact_path:
        logger.info("Image artifact: %s", result.artifact_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
