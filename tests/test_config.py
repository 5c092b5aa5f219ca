from pathlib import Path

import pytest

from nixlxc_builder.build_config import BuildConfig, load_build_config
from nixlxc_builder.errors import ConfigError
from nixlxc_builder.lib.nix import EDGE_REPOSITORIES


def test_missing_config_file_gives_defaults(tmp_path: Path) -> None:
    cfg = load_build_config(str(tmp_path / "absent.yaml"))

    assert cfg.work_dir == "./workdir/"
    assert cfg.archive_name == "base.txz"
    assert cfg.base_url == "https://dl-cdn.alpinelinux.org/alpine/latest-stable/releases"
    assert cfg.flavor == "alpine-minirootfs"
    assert cfg.nameserver == "8.8.8.8"
    assert cfg.repositories == list(EDGE_REPOSITORIES)
    assert cfg.nix_channel == "https://nixos.org/channels/nixpkgs-unstable"
    assert cfg.http.timeout is None


def test_yaml_config_overrides_defaults(tmp_path: Path) -> None:
    p = tmp_path / "nixlxc.yaml"
    p.write_text(
        "paths:\n"
        "  work_dir: /srv/stage\n"
        "alpine:\n"
        "  base_url: https://mirror.example/alpine/latest-stable/releases/\n"
        "dns:\n"
        "  nameserver: 1.1.1.1\n"
        "http:\n"
        "  connect_timeout: 10\n",
        encoding="utf-8",
    )

    cfg = load_build_config(str(p))

    assert cfg.work_dir == "/srv/stage"
    assert cfg.base_url.startswith("https://mirror.example/")
    assert cfg.nameserver == "1.1.1.1"
    assert cfg.http.timeout == (10.0, None)


def test_non_yaml_suffix_is_rejected(tmp_path: Path) -> None:
    p = tmp_path / "nixlxc.json"
    p.write_text("{}", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_build_config(str(p))


def test_non_mapping_document_is_rejected(tmp_path: Path) -> None:
    p = tmp_path / "nixlxc.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_build_config(str(p))


def test_bad_timeout_is_a_config_error() -> None:
    cfg = BuildConfig(raw={"http": {"read_timeout": "soon"}})

    with pytest.raises(ConfigError):
        cfg.http


@pytest.mark.parametrize("body", ["paths: oops\n", "http: [1]\n", "alpine: 3\n", "dns: nameserver\n", "nix: [a, b]\n"])
def test_non_mapping_section_is_rejected(tmp_path: Path, body: str) -> None:
    p = tmp_path / "nixlxc.yaml"
    p.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_build_config(str(p))

    assert "must be a mapping" in str(excinfo.value)


def test_null_section_means_defaults(tmp_path: Path) -> None:
    p = tmp_path / "nixlxc.yaml"
    p.write_text("paths:\nhttp: null\n", encoding="utf-8")

    cfg = load_build_config(str(p))

    assert cfg.work_dir == "./workdir/"
    assert cfg.http.timeout is None
