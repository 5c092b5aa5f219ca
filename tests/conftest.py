"""Shared test fixtures."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from nixlxc_builder.build_config import BuildConfig
from nixlxc_builder.errors import CommandError, TransportError
from nixlxc_builder.lib.command import CmdResult

BASE = "https://dl-cdn.alpinelinux.org/alpine/latest-stable/releases"
KNOWN_BYTES = b"0123456789"


class FakeRunner:
    """Records argv lists; fails (exit 1) when ``fail_on`` returns True."""

    def __init__(
        self,
        fail_on: Optional[Callable[[List[str]], bool]] = None,
        *,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.calls: List[List[str]] = []
        self.fail_on = fail_on
        self.stdout = stdout
        self.stderr = stderr

    def __call__(self, argv: Sequence[str], *, check: bool = True, **_: object) -> CmdResult:
        argv = list(argv)
        self.calls.append(argv)
        rc = 1 if self.fail_on is not None and self.fail_on(argv) else 0
        if check and rc != 0:
            raise CommandError(
                "Command failed (1): " + " ".join(argv),
                argv=argv,
                returncode=rc,
                stdout=self.stdout,
                stderr=self.stderr,
            )
        return CmdResult(argv=argv, returncode=rc, stdout=self.stdout, stderr=self.stderr)

    def commands(self, name: str) -> List[List[str]]:
        return [c for c in self.calls if c[0] == name]


class FakeClient:
    def __init__(self, texts: Dict[str, str], blobs: Dict[str, bytes]) -> None:
        self.texts = texts
        self.blobs = blobs
        self.downloads: List[str] = []

    def get_text(self, url: str) -> str:
        if url not in self.texts:
            raise TransportError(f"GET {url} failed: 404", url=url)
        return self.texts[url]

    def download(self, url: str, dest) -> int:
        self.downloads.append(url)
        if url not in self.blobs:
            raise TransportError(f"GET {url} failed: 404", url=url)
        data = self.blobs[url]
        Path(dest).write_bytes(data)
        return len(data)


def sha512(data: bytes) -> str:
    return hashlib.sha512(data).hexdigest()


def manifest_yaml(entries: Sequence[Dict[str, object]]) -> str:
    out = []
    for e in entries:
        out.append(f"- flavor: {e['flavor']}")
        out.append(f"  file: {e['file']}")
        out.append(f"  size: {e['size']}")
        out.append(f"  sha512: {e['sha512']}")
    return "\n".join(out) + "\n"


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def release_manifest() -> str:
    return manifest_yaml(
        [
            {"flavor": "alpine-minirootfs", "file": "x.tar.xz", "size": 10, "sha512": sha512(KNOWN_BYTES)},
            {"flavor": "other", "file": "y.tar.xz", "size": 5, "sha512": sha512(b"abcde")},
        ]
    )


@pytest.fixture
def fake_client(release_manifest: str) -> FakeClient:
    return FakeClient(
        texts={f"{BASE}/x86_64/latest-releases.yaml": release_manifest},
        blobs={f"{BASE}/x86_64/x.tar.xz": KNOWN_BYTES},
    )


@pytest.fixture
def build_cfg(tmp_path: Path) -> BuildConfig:
    return BuildConfig(raw={"paths": {"work_dir": str(tmp_path / "workdir")}})
