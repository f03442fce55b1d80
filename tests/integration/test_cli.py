"""Tests for the command-line entry point."""

import pytest

from convert import main
from conftest import RESX_CONTENT, write_text


class TestCli:
    """Test convert.py argument handling."""

    def test_converts_repository(self, repo_root, resx_file):
        assert main([str(repo_root), "-l", "de", "--no-color"]) == 0
        assert (resx_file.parent / "xlf" / "Strings.de.xlf").exists()
        assert not (resx_file.parent / "xlf" / "Strings.fr.xlf").exists()

    def test_two_way_flag(self, repo_root, resx_file):
        assert main([str(repo_root), "-l", "de", "--two-way", "--no-color"]) == 0
        assert (resx_file.parent / "Strings.de.resx").exists()

    def test_missing_root(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "missing"), "--no-color"])
        assert exc_info.value.code == 2

    def test_duplicate_languages(self, repo_root):
        with pytest.raises(SystemExit) as exc_info:
            main([str(repo_root), "-l", "de", "de", "--no-color"])
        assert exc_info.value.code == 2


class TestCliFiles:
    """Test converting selected files."""

    def test_only_listed_files(self, repo_root, resx_file, vsct_file):
        assert main([str(repo_root), "-l", "de", "-f", str(vsct_file), "--no-color"]) == 0
        assert (vsct_file.parent / "xlf" / "Commands.vsct.de.xlf").exists()
        assert not (resx_file.parent / "xlf" / "Strings.de.xlf").exists()

    def test_unsupported_file(self, repo_root):
        notes = repo_root / "notes.txt"
        notes.write_text("hello", encoding='utf-8')

        with pytest.raises(SystemExit) as exc_info:
            main([str(repo_root), "--files", str(notes), "--no-color"])
        assert exc_info.value.code == 2

    def test_file_outside_root(self, repo_root, tmp_path):
        outside = write_text(tmp_path / "elsewhere" / "Strings.resx", RESX_CONTENT)

        with pytest.raises(SystemExit) as exc_info:
            main([str(repo_root), "--files", str(outside), "--no-color"])
        assert exc_info.value.code == 2

    def test_missing_file(self, repo_root):
        with pytest.raises(SystemExit) as exc_info:
            main([str(repo_root), "--files", str(repo_root / "Missing.resx"), "--no-color"])
        assert exc_info.value.code == 2
