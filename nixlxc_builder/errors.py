"""Error taxonomy for a build run.

Every error raised by the builder derives from BuildError so the entry point
can report any failure with a single message and exit status 1.
"""

from __future__ import annotations

from typing import List, Optional, Sequence


class BuildError(Exception):
    """Base class for all builder failures."""


class ConfigError(BuildError):
    pass


class UnsupportedPlatformError(BuildError):
    def __init__(self, os_name: str) -> None:
        super().__init__(
            f"Unsupported platform. Only `linux` is supported, but `{os_name}` is detected."
        )
        self.os_name = os_name


class UnsupportedArchitectureError(BuildError):
    def __init__(self, machine: str) -> None:
        super().__init__(
            "Unsupported architecture. Only `x86`, `x86_64` and `aarch64` are supported, "
            f"but `{machine}` is detected."
        )
        self.machine = machine


class FilesystemError(BuildError):
    """Create/open/read/write failures on the host filesystem.

    ``kind`` classifies the failure for callers that need to branch on it
    (e.g. ``directory-not-empty`` or ``not-a-directory``).
    """

    def __init__(self, message: str, *, path: str, kind: str = "io") -> None:
        super().__init__(message)
        self.path = path
        self.kind = kind


class TransportError(BuildError):
    def __init__(self, message: str, *, url: str) -> None:
        super().__init__(message)
        self.url = url


class ManifestParseError(BuildError):
    pass


class VariantNotFoundError(BuildError):
    def __init__(self, flavor: str) -> None:
        super().__init__(f"Unable to find `{flavor}` release in the release manifest")
        self.flavor = flavor


class SizeMismatchError(BuildError):
    def __init__(self, *, expected: int, actual: int) -> None:
        super().__init__(
            f"Downloaded archive size mismatch: expected {expected}, but got {actual}"
        )
        self.expected = expected
        self.actual = actual


class ChecksumMismatchError(BuildError):
    def __init__(self, *, expected: str, actual: str) -> None:
        super().__init__(
            f"SHA-512 checksum doesn't match. Expected `{expected}`, got `{actual}`"
        )
        self.expected = expected
        self.actual = actual


class ExtractionError(BuildError):
    pass


class CommandError(BuildError):
    """A subprocess exited non-zero (or could not be started).

    ``returncode`` is None when the process never ran.
    """

    def __init__(
        self,
        message: str,
        *,
        argv: Sequence[str],
        returncode: Optional[int],
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.argv: List[str] = list(argv)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base}\n= stdout:\n{self.stdout}\n= stderr:\n{self.stderr}"


class MountError(BuildError):
    """A kernel filesystem could not be mounted.

    ``mounted`` holds the handles acquired before the failure; whoever catches
    this error owns them and must release them.
    """

    def __init__(self, message: str, *, fstype: str, mounted: Optional[list] = None) -> None:
        super().__init__(message)
        self.fstype = fstype
        self.mounted = list(mounted or [])


class StepFailedError(BuildError):
    def __init__(self, step_id: str, cause: BaseException) -> None:
        super().__init__(f"Step {step_id} failed: {cause}")
        self.step_id = step_id
        self.cause = cause
