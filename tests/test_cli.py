"""
Tests for the command-line interface.
"""

import argparse

import pytest

from assetdeploy import cli
from assetdeploy import config as config_module
from assetdeploy.config import Config, load_config_file

from .conftest import INDEX_HTML, tree_of


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setattr(config_module, "user_config_path", lambda: tmp_path / "user" / "config.toml")
    monkeypatch.setattr(cli, "user_config_path", lambda: tmp_path / "user" / "config.toml")
    monkeypatch.delenv("ASSETDEPLOY_LOG_LEVEL", raising=False)
    monkeypatch.delenv("ASSETDEPLOY_CHUNK_SIZE", raising=False)
    return workdir


class TestExtract:
    def test_archive_locator(self, sample_zip, tmp_path):
        destination = tmp_path / "D"

        code = cli.main(["extract", f"jar:file://{sample_zip}!/prefix", str(destination)])

        assert code == 0
        files, dirs = tree_of(destination)
        assert files == {"a.txt", "sub/b.txt"}
        assert dirs == {"sub"}

    def test_include_and_exclude(self, source_tree, tmp_path):
        destination = tmp_path / "D"

        code = cli.main([
            "extract", str(source_tree), str(destination),
            "--include", "*.txt", "--exclude", "b.*",
        ])

        assert code == 0
        files, _ = tree_of(destination)
        assert files == {"a.txt"}

    def test_missing_only_keeps_existing(self, source_tree, tmp_path):
        destination = tmp_path / "D"
        destination.mkdir()
        (destination / "a.txt").write_bytes(b"customized")

        cli.main(["extract", str(source_tree), str(destination), "--missing-only"])

        assert (destination / "a.txt").read_bytes() == b"customized"
        assert (destination / "sub" / "b.txt").read_bytes() == b"bravo"

    def test_incomplete_extraction_fails(self, tmp_path, capsys):
        archive = tmp_path / "broken.zip"
        archive.write_bytes(b"garbage")

        code = cli.main(["extract", f"zip:{archive}!/x", str(tmp_path / "D")])

        assert code == 1
        assert "incomplete" in capsys.readouterr().out

    def test_missing_source_fails(self, tmp_path, capsys):
        code = cli.main(["extract", str(tmp_path / "missing"), str(tmp_path / "D")])

        assert code == 1
        assert "Copy failed" in capsys.readouterr().out

    def test_bad_locator_fails(self, tmp_path):
        assert cli.main(["extract", "ftp://host/x.zip", str(tmp_path / "D")]) == 1


class TestWrite:
    def test_writes_resource(self, fixture_package, tmp_path):
        target = tmp_path / "out" / "index.html"

        code = cli.main(["write", "templates/index.html", str(target), "--package", fixture_package])

        assert code == 0
        assert target.read_bytes() == INDEX_HTML

    def test_missing_resource(self, fixture_package, tmp_path, capsys):
        target = tmp_path / "out.html"

        code = cli.main(["write", "templates/nope.html", str(target), "--package", fixture_package])

        assert code == 1
        assert not target.exists()
        assert "not found" in capsys.readouterr().out


class TestList:
    def test_lists_entries(self, sample_zip, capsys):
        code = cli.main(["list", str(sample_zip)])

        out = capsys.readouterr().out
        assert code == 0
        assert "prefix/a.txt" in out
        assert "3 files, 1 directories" in out

    def test_not_an_archive(self, tmp_path):
        text = tmp_path / "notes.txt"
        text.write_text("hello")

        assert cli.main(["list", str(text)]) == 1


class TestSetup:
    def test_creates_loadable_config(self, tmp_path):
        output = tmp_path / "conf" / "assetdeploy.toml"

        code = cli.main(["setup", "--output", str(output)])

        assert code == 0
        config = Config(**load_config_file(output))
        assert config.chunk_size == 65536
        assert config.anchor_package == "assetdeploy"

    def test_default_location(self, isolated):
        assert cli.main(["setup"]) == 0
        assert (isolated / "assetdeploy.toml").exists()

    def test_user_location(self, tmp_path):
        assert cli.main(["setup", "--user"]) == 0
        assert (tmp_path / "user" / "config.toml").exists()

    def test_refuses_to_overwrite(self, tmp_path):
        output = tmp_path / "assetdeploy.toml"
        output.write_text("# mine\n")

        assert cli.main(["setup", "--output", str(output)]) == 1
        assert output.read_text() == "# mine\n"

        assert cli.main(["setup", "--output", str(output), "--force"]) == 0
        assert "chunk_size" in output.read_text()


class TestBuildConfig:
    def test_cli_overrides_file(self, tmp_path):
        path = tmp_path / "c.toml"
        path.write_text('log_level = "ERROR"\nchunk_size = 2048\n')
        args = argparse.Namespace(config=str(path), log_level="DEBUG", package=None)

        config = cli.build_config(args)

        assert config.log_level == "DEBUG"
        assert config.chunk_size == 2048

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "c.toml"
        path.write_text("chunk_size = 2048\n")
        monkeypatch.setenv("ASSETDEPLOY_CHUNK_SIZE", "8192")
        args = argparse.Namespace(config=str(path), log_level=None, package=None)

        assert cli.build_config(args).chunk_size == 8192

    def test_package_option(self):
        args = argparse.Namespace(config=None, log_level=None, package="myapp")

        assert cli.build_config(args).anchor_package == "myapp"


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "usage" in capsys.readouterr().out
