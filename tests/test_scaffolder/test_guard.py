"""Tests for DirectoryGuard."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from create_rext.scaffolder.errors import DestinationExistsError
from create_rext.scaffolder.guard import DirectoryGuard

pytestmark = pytest.mark.unit


class TestDirectoryGuard:
    def test_missing_path_passes(self, tmp_path: Path):
        target = tmp_path / "my-app"
        assert DirectoryGuard().ensure_absent(target) == target
        assert not target.exists()

    def test_existing_directory_rejected(self, tmp_path: Path):
        target = tmp_path / "my-app"
        target.mkdir()
        with pytest.raises(DestinationExistsError) as exc_info:
            DirectoryGuard().ensure_absent(target)
        assert exc_info.value.path == target
        assert 'Directory "my-app" already exists.' in str(exc_info.value)

    def test_existing_file_rejected(self, tmp_path: Path):
        target = tmp_path / "my-app"
        target.write_text("not a directory", encoding="utf-8")
        with pytest.raises(DestinationExistsError):
            DirectoryGuard().ensure_absent(target)

    @pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="symlinks")
    def test_dangling_symlink_rejected(self, tmp_path: Path):
        target = tmp_path / "my-app"
        target.symlink_to(tmp_path / "nowhere")
        with pytest.raises(DestinationExistsError):
            DirectoryGuard().ensure_absent(target)

    def test_existing_contents_untouched(self, tmp_path: Path):
        target = tmp_path / "my-app"
        target.mkdir()
        (target / "keep.txt").write_text("precious", encoding="utf-8")
        with pytest.raises(DestinationExistsError):
            DirectoryGuard().ensure_absent(target)
        assert (target / "keep.txt").read_text(encoding="utf-8") == "precious"
