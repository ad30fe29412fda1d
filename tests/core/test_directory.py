"""
Tests for v8kit.core.directory.
"""

from pathlib import Path

import pytest

from v8kit.core.directory import (
    SOURCE_TREE_MARKER,
    BuildRootResolver,
    ensure_source_tree,
)
from v8kit.core.exceptions import ConfigurationError, SourceTreeMissingError


class TestBuildRootResolver:
    def test_target_dir_is_three_levels_up(self, out_dir, target_dir):
        resolver = BuildRootResolver(out_dir)
        assert resolver.target_dir() == target_dir
        assert target_dir.name == "debug"

    def test_scratch_dirs(self, out_dir, target_dir):
        resolver = BuildRootResolver(out_dir)

        assert resolver.clang_dir() == target_dir / "clang"
        assert resolver.gn_ninja_dir() == target_dir / "gn_ninja_binaries"
        assert resolver.scratch_dir("other") == target_dir / "other"

    def test_gn_out_dir_inside_out_dir(self, out_dir):
        assert BuildRootResolver(out_dir).gn_out_dir() == out_dir / "gn_out"

    def test_shallow_out_dir_rejected(self):
        resolver = BuildRootResolver(Path("/out"))
        with pytest.raises(ConfigurationError, match="target directory"):
            resolver.target_dir()

    def test_does_not_touch_filesystem(self, tmp_path):
        resolver = BuildRootResolver(tmp_path / "a" / "b" / "c" / "out")
        resolver.clang_dir()
        assert not (tmp_path / "a").exists()


class TestEnsureSourceTree:
    def test_present(self, manifest_dir):
        assert ensure_source_tree(manifest_dir) == manifest_dir / SOURCE_TREE_MARKER

    def test_missing(self, tmp_path):
        with pytest.raises(SourceTreeMissingError) as exc_info:
            ensure_source_tree(tmp_path)

        assert "git submodule update --init --recursive" in str(exc_info.value)

    def test_marker_must_be_directory(self, tmp_path):
        marker = tmp_path / SOURCE_TREE_MARKER
        marker.parent.mkdir(parents=True)
        marker.write_text("")

        with pytest.raises(SourceTreeMissingError):
            ensure_source_tree(tmp_path)
