import logging
from pathlib import Path

import pytest

from conftest import FakeRunner
from nixlxc_builder.errors import ExtractionError
from nixlxc_builder.lib.extract import extract_archive
from nixlxc_builder.logging_utils import configure_logging


def test_extract_unpacks_into_parent_preserving_permissions(tmp_path: Path, fake_runner: FakeRunner) -> None:
    archive = tmp_path / "workdir" / "base.txz"

    dest = extract_archive(archive, runner=fake_runner)

    assert dest == tmp_path / "workdir"
    assert fake_runner.calls == [["tar", "-xpf", str(archive), "-C", str(tmp_path / "workdir")]]


def test_extract_failure_is_an_extraction_error(tmp_path: Path) -> None:
    runner = FakeRunner(fail_on=lambda argv: True, stderr="xz: (stdin): File format not recognized")

    with pytest.raises(ExtractionError) as excinfo:
        extract_archive(tmp_path / "base.txz", runner=runner)

    assert "File format not recognized" in str(excinfo.value)


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield root
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    for attr in ("_nixlxc_configured", "_nixlxc_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)


def test_configure_logging_writes_file_once(tmp_path: Path, clean_root_logger: logging.Logger) -> None:
    log_path = tmp_path / "logs" / "build.log"

    first = configure_logging(str(log_path), also_console=False)
    second = configure_logging(str(tmp_path / "other.log"), also_console=False)
    logging.getLogger("nixlxc_builder.test").info("hello from test")

    assert first == second == str(log_path)
    assert "hello from test" in log_path.read_text(encoding="utf-8")
    assert not (tmp_path / "other.log").exists()


def test_configure_logging_falls_back_to_console_only(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, clean_root_logger: logging.Logger
) -> None:
    def unwritable(path, *args, **kwargs):
        raise PermissionError(13, "Permission denied", path)

    monkeypatch.setattr("nixlxc_builder.logging_utils.logging.FileHandler", unwritable)
    before = list(clean_root_logger.handlers)

    chosen = configure_logging(str(tmp_path / "logs" / "build.log"), also_console=False)

    added = [h for h in clean_root_logger.handlers if h not in before]
    assert chosen is None
    assert len(added) == 1
    assert isinstance(added[0], logging.StreamHandler)
