"""Alpine release manifest handling and verified archive download."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, Union

import yaml

from ..errors import (
    ChecksumMismatchError,
    FilesystemError,
    ManifestParseError,
    SizeMismatchError,
    VariantNotFoundError,
)
from .arch import Arch

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://dl-cdn.alpinelinux.org/alpine/latest-stable/releases"
MINIROOTFS_FLAVOR = "alpine-minirootfs"
MANIFEST_NAME = "latest-releases.yaml"

_HASH_CHUNK = 64 * 1024


class Transport(Protocol):
    def get_text(self, url: str) -> str:
        ...

    def download(self, url: str, dest: Union[str, Path]) -> int:
        ...


@dataclass(frozen=True)
class ReleaseEntry:
    flavor: str
    file: str
    size: int
    sha512: str

    @classmethod
    def from_record(cls, rec: Any, index: int) -> "ReleaseEntry":
        if not isinstance(rec, dict):
            raise ManifestParseError(f"Release #{index} is not a mapping")
        missing = [k for k in ("flavor", "file", "size", "sha512") if k not in rec]
        if missing:
            raise ManifestParseError(f"Release #{index} is missing {', '.join(missing)}")
        size = rec["size"]
        # bool is an int subclass; reject it explicitly.
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise ManifestParseError(f"Release #{index} has invalid size {size!r}")
        return cls(
            flavor=str(rec["flavor"]),
            file=str(rec["file"]),
            size=size,
            sha512=str(rec["sha512"]),
        )


def release_url(base_url: str, arch: Arch, name: str) -> str:
    return f"{base_url.rstrip('/')}/{arch.release_dir}/{name}"


def fetch_manifest(client: Transport, arch: Arch, *, base_url: str = DEFAULT_BASE_URL) -> str:
    return client.get_text(release_url(base_url, arch, MANIFEST_NAME))


def parse_manifest(text: str) -> list[ReleaseEntry]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ManifestParseError(f"Failed to parse release manifest: {e}") from e

    if not isinstance(data, list):
        raise ManifestParseError("Release manifest must contain a list of releases")

    return [ReleaseEntry.from_record(rec, i) for i, rec in enumerate(data)]


def select_entry(text: str, flavor: str = MINIROOTFS_FLAVOR) -> ReleaseEntry:
    """Return the first release whose flavor matches, in document order."""

    for entry in parse_manifest(text):
        if entry.flavor == flavor:
            logger.info("Selected %s (%s, %d bytes)", entry.file, entry.flavor, entry.size)
            return entry
    raise VariantNotFoundError(flavor)


def download_archive(
    client: Transport,
    arch: Arch,
    entry: ReleaseEntry,
    dest: Union[str, Path],
    *,
    base_url: str = DEFAULT_BASE_URL,
) -> int:
    return client.download(release_url(base_url, arch, entry.file), dest)


def verify_size(written: int, entry: ReleaseEntry) -> None:
    if written != entry.size:
        raise SizeMismatchError(expected=entry.size, actual=written)


def sha512_file(path: Union[str, Path]) -> str:
    h = hashlib.sha512()
    p = Path(path)
    try:
        with p.open("rb") as fh:
            for chunk in iter(lambda: fh.read(_HASH_CHUNK), b""):
                h.update(chunk)
    except OSError as e:
        raise FilesystemError(f"Unable to read `{p}`: {e}", path=str(p)) from e
    return h.hexdigest()


def verify_checksum(path: Union[str, Path], entry: ReleaseEntry) -> None:
    actual = sha512_file(path)
    if actual != entry.sha512:
        raise ChecksumMismatchError(expected=entry.sha512, actual=actual)


def acquire_archive(
    client: Transport,
    arch: Arch,
    entry: ReleaseEntry,
    dest: Union[str, Path],
    *,
    base_url: str = DEFAULT_BASE_URL,
) -> Path:
    """Download ``entry`` to ``dest`` and verify size, then checksum.

    A file that fails verification stays on disk.
    """

    written = download_archive(client, arch, entry, dest, base_url=base_url)
    verify_size(written, entry)
    verify_checksum(dest, entry)
    return Path(dest)
