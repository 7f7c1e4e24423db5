"""Shared test fixtures."""

from __future__ import annotations

import zipfile
from pathlib import Path, PurePosixPath

import pytest

from artifact_collector.core.inspector import ArchiveInspector, ZipfileInspector
from artifact_collector.models.candidate import Candidate
from artifact_collector.rules.context import HeuristicOptions, RuleContext


def write_jar(
    path: Path,
    classes: list[str] | None = None,
    manifest: dict[str, str] | None = None,
    extra: list[str] | None = None,
) -> Path:
    """Write a small but valid ZIP archive shaped like a JAR."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        lines = ["Manifest-Version: 1.0"]
        lines += [f"{k}: {v}" for k, v in (manifest or {}).items()]
        archive.writestr("META-INF/MANIFEST.MF", "\n".join(lines) + "\n")
        for name in classes or []:
            archive.writestr(name, b"\xca\xfe\xba\xbe")
        for name in extra or []:
            archive.writestr(name, b"")
    return path


def write_file(path: Path, data: bytes = b"MZ\x90\x00") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def write_corrupt_jar(path: Path) -> Path:
    """Write a deflated JAR whose container opens but whose member data is garbage."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("acme/Main.class", b"\xca\xfe\xba\xbe" * 256)
        info = archive.getinfo("acme/Main.class")

    data = bytearray(path.read_bytes())
    # Local file header: 30 fixed bytes, then the name and extra field.
    name_len = int.from_bytes(data[info.header_offset + 26:info.header_offset + 28], "little")
    extra_len = int.from_bytes(data[info.header_offset + 28:info.header_offset + 30], "little")
    start = info.header_offset + 30 + name_len + extra_len
    # 0xFF opens a deflate block of the reserved type 3.
    data[start:start + 2] = b"\xff\xff"
    path.write_bytes(bytes(data))
    return path


def make_context(
    root: Path,
    relative: str,
    inspector: ArchiveInspector | None = None,
    options: HeuristicOptions | None = None,
) -> RuleContext:
    """Rule context for the file at *relative* below *root*."""
    path = root / relative
    candidate = Candidate(path=path, kind=path.suffix[1:], relative_path=PurePosixPath(relative))
    return RuleContext(candidate, inspector or ZipfileInspector(), options)


@pytest.fixture(autouse=True)
def isolate_config(tmp_path, monkeypatch):
    """Point XDG_CONFIG_HOME at a temp directory so user settings never leak in."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    return config_dir


@pytest.fixture
def build_dir(tmp_path):
    root = tmp_path / "build"
    root.mkdir()
    return root


@pytest.fixture
def app_jar():
    """Factory for a JAR that looks like a first-party application."""

    def _make(path: Path) -> Path:
        return write_jar(
            path,
            classes=["acme/shop/Main.class", "acme/shop/Cart.class", "acme/shop/Order.class"],
            manifest={"Main-Class": "acme.shop.Main"},
        )

    return _make


@pytest.fixture
def library_jar():
    """Factory for a JAR that looks like a published third-party library."""

    def _make(path: Path) -> Path:
        return write_jar(
            path,
            classes=["org/lib/json/JsonUtil.class", "org/lib/json/ParserFactory.class"],
            extra=["META-INF/maven/org.lib/json/pom.properties"],
        )

    return _make
