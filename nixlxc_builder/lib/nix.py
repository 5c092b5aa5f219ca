from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from ..errors import CommandError, FilesystemError
from .chroot import chroot_cmd
from .command import CmdResult, Runner, run_cmd

logger = logging.getLogger(__name__)

EDGE_REPOSITORIES = (
    "https://dl-cdn.alpinelinux.org/alpine/edge/main/",
    "https://dl-cdn.alpinelinux.org/alpine/edge/community/",
    "https://dl-cdn.alpinelinux.org/alpine/edge/testing/",
)
NIX_PACKAGES = ("bash", "tar", "xz", "nix")
NIXPKGS_CHANNEL = "https://nixos.org/channels/nixpkgs-unstable"
LXC_CONFIGURATION = "/lxc.nix"


def _chroot(root: Path, argv: Sequence[str], what: str, runner: Runner) -> CmdResult:
    try:
        return chroot_cmd(root, argv, runner=runner)
    except CommandError as e:
        raise CommandError(
            f"{what}: {e.args[0]}",
            argv=e.argv,
            returncode=e.returncode,
            stdout=e.stdout,
            stderr=e.stderr,
        ) from e


def write_repositories(target_root: Union[str, Path], repositories: Sequence[str] = EDGE_REPOSITORIES) -> None:
    p = Path(target_root) / "etc/apk/repositories"
    try:
        p.write_text("".join(f"{r}\n" for r in repositories), encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Failed to update `{p}`: {e}", path=str(p)) from e
    logger.info("Configured apk repositories: %s", ", ".join(repositories))


def configure_nix(target_root: Union[str, Path]) -> None:
    """Disable the Nix build sandbox; it cannot work inside a plain chroot."""

    p = Path(target_root) / "etc/nix/nix.conf"
    try:
        with p.open("a", encoding="utf-8") as fh:
            fh.write("sandbox = false\n")
    except OSError as e:
        raise FilesystemError(f"Unable to update Nix configuration file `{p}`: {e}", path=str(p)) from e


def remove_default_profile(target_root: Union[str, Path]) -> None:
    p = Path(target_root) / "nix/var/nix/profiles/default"
    try:
        if p.is_symlink():
            p.unlink()
        else:
            p.rmdir()
    except OSError as e:
        raise FilesystemError(f"Failed to remove default profile directory `{p}`: {e}", path=str(p)) from e


def install_nix(
    target_root: Union[str, Path],
    *,
    repositories: Sequence[str] = EDGE_REPOSITORIES,
    channel: str = NIXPKGS_CHANNEL,
    runner: Runner = run_cmd,
) -> None:
    root = Path(target_root)

    write_repositories(root, repositories)
    _chroot(root, ["apk", "update"], "Failed to update apk repositories", runner)
    _chroot(root, ["apk", "add", *NIX_PACKAGES], "Failed to install the `nix` package", runner)
    configure_nix(root)
    _chroot(root, ["nix-channel", "--add", channel], "Failed to subscribe to nixpkgs channel", runner)
    remove_default_profile(root)
    _chroot(root, ["nix-channel", "--update"], "Failed to update Nix channels", runner)


def install_nixos_generators(target_root: Union[str, Path], *, runner: Runner = run_cmd) -> None:
    _chroot(
        Path(target_root),
        ["nix-env", "-iA", "nixpkgs.nixos-generators"],
        "Failed to install `nixos-generators`",
        runner,
    )


def generate_lxc_image(
    target_root: Union[str, Path],
    *,
    configuration: Optional[str] = LXC_CONFIGURATION,
    runner: Runner = run_cmd,
) -> str:
    """Run nixos-generate for an LXC tarball; returns the path it printed.

    ``configuration`` is a NixOS module path inside the chroot, passed as -c;
    None builds the generator's default system. The returned path is inside
    the chroot (e.g. /nix/store/...). Not part of the default step list;
    wire it in through a post-provision hook.
    """

    argv = ["nixos-generate", "-f", "lxc"]
    if configuration:
        argv += ["-c", configuration]
    r = _chroot(Path(target_root), argv, "Failed to generate LXC image", runner)
    lines = [ln.strip() for ln in r.stdout.splitlines() if ln.strip()]
    return lines[-1] if lines else ""
