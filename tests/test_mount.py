from pathlib import Path

import pytest

from conftest import FakeRunner
from nixlxc_builder.errors import CommandError, MountError
from nixlxc_builder.lib.mount import mount_kernel_filesystems, release_all


def test_mounts_in_fixed_order_with_types_and_options(tmp_path: Path, fake_runner: FakeRunner) -> None:
    handles = mount_kernel_filesystems(tmp_path, runner=fake_runner)

    assert fake_runner.calls == [
        ["mount", "-t", "devtmpfs", "devtmpfs", str(tmp_path / "dev")],
        ["mount", "-t", "devpts", "-o", "gid=5", "devpts", str(tmp_path / "dev/pts")],
        ["mount", "-t", "proc", "proc", str(tmp_path / "proc")],
        ["mount", "-t", "sysfs", "sysfs", str(tmp_path / "sys")],
    ]
    assert [h.fs.fstype for h in handles] == ["devtmpfs", "devpts", "proc", "sysfs"]


def test_release_all_unmounts_lazily_in_reverse_order(tmp_path: Path, fake_runner: FakeRunner) -> None:
    handles = mount_kernel_filesystems(tmp_path, runner=fake_runner)
    fake_runner.calls.clear()

    release_all(handles)

    assert handles == []
    assert fake_runner.calls == [
        ["umount", "-l", str(tmp_path / "sys")],
        ["umount", "-l", str(tmp_path / "proc")],
        ["umount", "-l", str(tmp_path / "dev/pts")],
        ["umount", "-l", str(tmp_path / "dev")],
    ]


def test_failure_on_third_mount_leaves_two_handles(tmp_path: Path) -> None:
    runner = FakeRunner(fail_on=lambda argv: argv[:3] == ["mount", "-t", "proc"])

    with pytest.raises(MountError) as excinfo:
        mount_kernel_filesystems(tmp_path, runner=runner)

    err = excinfo.value
    assert err.fstype == "proc"
    assert [h.fs.fstype for h in err.mounted] == ["devtmpfs", "devpts"]
    assert isinstance(err.__cause__, CommandError)

    release_all(err.mounted)

    assert runner.commands("umount") == [
        ["umount", "-l", str(tmp_path / "dev/pts")],
        ["umount", "-l", str(tmp_path / "dev")],
    ]


def test_release_never_raises_and_runs_once(tmp_path: Path) -> None:
    runner = FakeRunner(fail_on=lambda argv: argv[0] == "umount")
    handles = mount_kernel_filesystems(tmp_path, runner=runner)
    first = handles[0]

    release_all(handles)
    first.release()

    assert len(runner.commands("umount")) == 4
    assert first.released


def test_release_survives_missing_umount_binary(tmp_path: Path, fake_runner: FakeRunner) -> None:
    handles = mount_kernel_filesystems(tmp_path, runner=fake_runner)

    def broken(argv, **_):
        raise CommandError("Unable to start command", argv=argv, returncode=None)

    for h in handles:
        h._runner = broken

    release_all(handles)

    assert handles == []
