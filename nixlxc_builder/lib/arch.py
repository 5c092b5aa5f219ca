from __future__ import annotations

from enum import Enum

from ..errors import UnsupportedArchitectureError


class Arch(Enum):
    """CPU architectures the Alpine release mirror publishes minirootfs for.

    Values are the host identifiers accepted by from_host().
    """

    AMD64 = "x86_64"
    X86 = "x86"
    AARCH64 = "aarch64"

    @classmethod
    def from_host(cls, machine: str) -> "Arch":
        for a in cls:
            if a.value == machine:
                return a
        raise UnsupportedArchitectureError(machine)

    @property
    def release_dir(self) -> str:
        """Directory name under .../releases/ on the Alpine mirror."""
        return _RELEASE_DIRS[self]


_RELEASE_DIRS = {
    Arch.AMD64: "x86_64",
    Arch.X86: "x86",
    Arch.AARCH64: "aarch64",
}
