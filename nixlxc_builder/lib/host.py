from __future__ import annotations

import logging
import platform
from dataclasses import dataclass

from ..errors import UnsupportedPlatformError
from .arch import Arch

logger = logging.getLogger(__name__)

# platform.machine() reports 32-bit x86 by CPU generation.
_MACHINE_ALIASES = {
    "i386": "x86",
    "i486": "x86",
    "i586": "x86",
    "i686": "x86",
}


@dataclass(frozen=True)
class HostEnv:
    """Host facts the builder depends on.

    Passed around explicitly so tests can substitute values without touching
    the real host.
    """

    os_name: str
    machine: str

    @classmethod
    def detect(cls) -> "HostEnv":
        machine = platform.machine()
        return cls(
            os_name=platform.system().lower(),
            machine=_MACHINE_ALIASES.get(machine, machine),
        )


def check_platform(host: HostEnv) -> None:
    if host.os_name != "linux":
        raise UnsupportedPlatformError(host.os_name)


def resolve_arch(host: HostEnv) -> Arch:
    arch = Arch.from_host(host.machine)
    logger.info("Host architecture %s -> %s", host.machine, arch.name)
    return arch
