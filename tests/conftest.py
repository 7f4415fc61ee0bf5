"""Shared fixtures for resource extractor tests."""

import sys
import zipfile
from pathlib import Path
from typing import Dict, Iterator

import pytest

from resource_extractor import MappingBundle

PACKAGE_NAME = "sample_assets"

SAMPLE_RESOURCES: Dict[str, bytes] = {
    "App.Assets.a.txt": b"alpha\n",
    "App.Assets.b.txt": b"bravo\r\n\x00\xff binary tail",
    "App.Assets.config.json": b'{"name":"demo","count":3}',
    "App.Other.c.txt": b"charlie",
}


@pytest.fixture
def mapping_bundle() -> MappingBundle:
    """Bundle with two text resources, a JSON config and one foreign name."""
    return MappingBundle(SAMPLE_RESOURCES)


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Existing, empty destination directory."""
    directory = tmp_path / "out"
    directory.mkdir()
    return directory


@pytest.fixture
def sample_package(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Importable package holding data files next to its Python sources."""
    root = tmp_path / "pkgs"
    package = root / PACKAGE_NAME
    (package / "html").mkdir(parents=True)
    (package / "__pycache__").mkdir()
    (package / "__init__.py").write_text("")
    (package / "helpers.py").write_text("VALUE = 1\n")
    (package / "__pycache__" / "helpers.cpython-312.pyc").write_bytes(b"\x00")
    (package / "config.json").write_bytes(b'{"name":"demo","count":3}')
    (package / "html" / "index.html").write_bytes(b"<html></html>")
    (package / "html" / "app.js").write_bytes(b"console.log(1);")

    sys.modules.pop(PACKAGE_NAME, None)
    monkeypatch.syspath_prepend(str(root))
    yield PACKAGE_NAME
    sys.modules.pop(PACKAGE_NAME, None)


@pytest.fixture
def sample_zip(tmp_path: Path) -> Path:
    """Zip archive with a nested member and an explicit directory entry."""
    archive = tmp_path / "assets.zip"
    with zipfile.ZipFile(archive, "w") as z:
        z.writestr("www/", "")
        z.writestr("www/index.html", b"<html></html>")
        z.writestr("www/app.js", b"console.log(1);")
        z.writestr("settings.json", b'{"name":"demo","count":3}')
    return archive


@pytest.fixture
def corrupt_zip(tmp_path: Path) -> Path:
    """Archive whose large stored member fails its CRC check near the end."""
    payload = bytes(range(256)) * 800
    archive = tmp_path / "corrupt.zip"
    with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_STORED) as z:
        z.writestr("www/ok.txt", b"ok")
        z.writestr("www/big.bin", payload)

    data = bytearray(archive.read_bytes())
    offset = data.find(payload[:64]) + 150_000
    data[offset] ^= 0xFF
    archive.write_bytes(bytes(data))
    return archive
