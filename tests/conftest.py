"""Shared fixtures: archives, resource trees and importable packages."""

import io
import sys
import tarfile
import zipfile
from pathlib import Path

import pytest

from assetdeploy.config import Config

FIXTURE_PACKAGE = "deploy_fixture"
ZIPPED_PACKAGE = "zipped_fixture"

INDEX_HTML = b"<html><body>{{ title }}</body></html>\n"
SITE_CSS = b"body { margin: 0; }\n"


def tree_of(root: Path) -> tuple[set[str], set[str]]:
    """Relative (files, directories) under root, as posix strings."""
    files = set()
    dirs = set()
    for item in root.rglob("*"):
        rel = item.relative_to(root).as_posix()
        if item.is_dir():
            dirs.add(rel)
        else:
            files.add(rel)
    return files, dirs


@pytest.fixture
def config() -> Config:
    return Config(chunk_size=1024)


@pytest.fixture
def sample_zip(tmp_path: Path) -> Path:
    """Archive with a mounted ``prefix`` tree and an unrelated ``other`` entry."""
    path = tmp_path / "bundle.jar"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("prefix/a.txt", b"alpha")
        zf.writestr("prefix/sub/", b"")
        zf.writestr("prefix/sub/b.txt", b"bravo")
        zf.writestr("other/c.txt", b"charlie")
    return path


@pytest.fixture
def sample_tar(tmp_path: Path) -> Path:
    path = tmp_path / "bundle.tar.gz"
    with tarfile.open(path, "w:gz") as tf:
        for name, data in [
            ("./prefix/a.txt", b"alpha"),
            ("./prefix/sub/b.txt", b"bravo"),
            ("./other/c.txt", b"charlie"),
        ]:
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))

        info = tarfile.TarInfo("./prefix/sub")
        info.type = tarfile.DIRTYPE
        tf.addfile(info)
    return path


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    root = tmp_path / "source"
    (root / "sub").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "a.txt").write_bytes(b"alpha")
    (root / "sub" / "b.txt").write_bytes(b"bravo")
    (root / "sub" / "style.css").write_bytes(SITE_CSS)
    return root


@pytest.fixture
def fixture_package(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """An importable package with bundled templates, installed as loose files."""
    root = tmp_path / "site-packages"
    pkg = root / FIXTURE_PACKAGE
    (pkg / "templates" / "css").mkdir(parents=True)
    (pkg / "__init__.py").write_text("")
    (pkg / "templates" / "index.html").write_bytes(INDEX_HTML)
    (pkg / "templates" / "css" / "site.css").write_bytes(SITE_CSS)

    monkeypatch.delitem(sys.modules, FIXTURE_PACKAGE, raising=False)
    monkeypatch.syspath_prepend(str(root))
    yield FIXTURE_PACKAGE
    sys.modules.pop(FIXTURE_PACKAGE, None)


@pytest.fixture
def zipped_package(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """The same templates, in a package imported from a zip file."""
    archive = tmp_path / "app.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr(f"{ZIPPED_PACKAGE}/__init__.py", "")
        zf.writestr(f"{ZIPPED_PACKAGE}/templates/index.html", INDEX_HTML)
        zf.writestr(f"{ZIPPED_PACKAGE}/templates/css/site.css", SITE_CSS)

    monkeypatch.delitem(sys.modules, ZIPPED_PACKAGE, raising=False)
    monkeypatch.syspath_prepend(str(archive))
    yield ZIPPED_PACKAGE
    sys.modules.pop(ZIPPED_PACKAGE, None)
