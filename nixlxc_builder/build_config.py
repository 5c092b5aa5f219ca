from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .lib.alpine import DEFAULT_BASE_URL, MINIROOTFS_FLAVOR
from .lib.http import HttpConfig
from .lib.nix import EDGE_REPOSITORIES, NIXPKGS_CHANNEL

DEFAULT_BUILD_CONFIG = "nixlxc.yaml"
SECTIONS = ("paths", "alpine", "dns", "nix", "http")


def _opt_float(v: Any, key: str) -> Optional[float]:
    if v is None:
        return None
    try:
        return float(v)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be a number or null, got {v!r}") from e


@dataclass(frozen=True)
class BuildConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    @property
    def work_dir(self) -> str:
        return str(self._section("paths").get("work_dir") or "./workdir/")

    @property
    def archive_name(self) -> str:
        return str(self._section("paths").get("archive_name") or "base.txz")

    @property
    def base_url(self) -> str:
        return str(self._section("alpine").get("base_url") or DEFAULT_BASE_URL)

    @property
    def flavor(self) -> str:
        return str(self._section("alpine").get("flavor") or MINIROOTFS_FLAVOR)

    @property
    def repositories(self) -> List[str]:
        return list(self._section("alpine").get("repositories") or EDGE_REPOSITORIES)

    @property
    def nameserver(self) -> str:
        return str(self._section("dns").get("nameserver") or "8.8.8.8")

    @property
    def nix_channel(self) -> str:
        return str(self._section("nix").get("channel") or NIXPKGS_CHANNEL)

    @property
    def http(self) -> HttpConfig:
        sec = self._section("http")
        return HttpConfig(
            connect_timeout_s=_opt_float(sec.get("connect_timeout"), "http.connect_timeout"),
            read_timeout_s=_opt_float(sec.get("read_timeout"), "http.read_timeout"),
        )


def load_build_config(path: Optional[str]) -> BuildConfig:
    """Load YAML config; a missing file means all defaults."""

    if not path:
        return BuildConfig()
    p = Path(path)
    if not p.exists():
        return BuildConfig()

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError(f"build config must be YAML: {p}")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Unable to read build config `{p}`: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{p} must contain a mapping/object")
    for name in SECTIONS:
        sec = raw.get(name)
        if sec is not None and not isinstance(sec, dict):
            raise ConfigError(f"{p}: `{name}` must be a mapping, got {type(sec).__name__}")

    return BuildConfig(raw=raw)
