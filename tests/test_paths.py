"""Tests for path handling."""

import tempfile
from pathlib import Path

import pytest

from prego_assets.core.errors import AssetPathError
from prego_assets.paths import (
    can_truncate_path,
    remove_empty_parents,
    resolve_sub_file,
    sanitize_filename,
    split_reference,
    truncate_path,
    validate_path_safety,
)


class TestSanitizeFilename:
    """Test filename sanitization."""

    def test_removes_dangerous_characters(self) -> None:
        """Test that dangerous characters are removed."""
        assert sanitize_filename("file<test>") == "filetest"
        assert sanitize_filename('big "rock"') == "big rock"
        assert sanitize_filename("what?|*") == "what"

    def test_removes_path_separators(self) -> None:
        """Test that path separators are removed."""
        assert sanitize_filename("../../etc/passwd") == "....etcpasswd"
        assert sanitize_filename("..\\windows") == "..windows"

    def test_safe_filenames_unchanged(self) -> None:
        """Test that safe filenames pass through unchanged."""
        assert sanitize_filename("Big_Arena") == "Big_Arena"


class TestValidatePathSafety:
    """Test path traversal prevention."""

    def test_allows_paths_within_base(self) -> None:
        """Test that paths within base directory are allowed."""
        with tempfile.TemporaryDirectory() as tmpdir:
            base = Path(tmpdir)
            validate_path_safety(base / "props" / "chair.obj", base)

    def test_rejects_path_traversal(self) -> None:
        """Test that path traversal attempts are rejected."""
        with tempfile.TemporaryDirectory() as tmpdir:
            base = Path(tmpdir)
            with pytest.raises(ValueError, match="escapes base directory"):
                validate_path_safety(base / ".." / ".." / "etc" / "passwd", base)


class TestTruncatePath:
    """Test turning absolute paths into stored references."""

    def test_file_below_asset_directory(self) -> None:
        """Test the common case of a resource next to its asset."""
        reference = truncate_path(
            Path("/game/pw-assets/maps/mars/mars.json"),
            Path("/game/pw-assets/maps/mars/textures/space_rock.png"),
        )
        assert reference == "textures/space_rock.png"

    def test_missing_inputs(self) -> None:
        """Test empty inputs."""
        assert truncate_path(Path("/a/b.json"), None) == ""
        assert truncate_path(None, Path("/a/c.png")) == str(Path("/a/c.png"))

    def test_can_truncate(self) -> None:
        """Test detection of files below the asset's directory."""
        asset = Path("/game/pw-assets/props/chair/chair.json")
        assert can_truncate_path(asset, Path("/game/pw-assets/props/chair/models/chair.obj"))
        assert can_truncate_path(asset, Path("/game/pw-assets/props/CHAIR/chair.obj"))
        assert not can_truncate_path(asset, Path("/home/me/chair.obj"))
        assert not can_truncate_path(None, Path("/home/me/chair.obj"))


class TestResolveSubFile:
    """Test expanding stored references."""

    def test_relative_reference(self) -> None:
        """Test a reference relative to the asset's directory."""
        resolved = resolve_sub_file(Path("/game/pw-assets/props/test/test.json"), "textures/pink.png")
        assert resolved == Path("/game/pw-assets/props/test/textures/pink.png")

    def test_backslash_reference(self) -> None:
        """Test that Windows-style separators are accepted."""
        resolved = resolve_sub_file(Path("/game/pw-assets/props/test/test.json"), "textures\\pink.png")
        assert resolved == Path("/game/pw-assets/props/test/textures/pink.png")

    def test_overlapping_segments_counted_once(self) -> None:
        """Test that a reference repeating the asset's directory isn't doubled."""
        resolved = resolve_sub_file(Path("/game/pw-assets/materials/rock/rock.json"), "rock/tex.png")
        assert resolved == Path("/game/pw-assets/materials/rock/tex.png")

    def test_truncate_then_resolve(self) -> None:
        """Test that a truncated path resolves back to the original."""
        asset = Path("/game/pw-assets/maps/mars/mars.json")
        file = Path("/game/pw-assets/maps/mars/textures/rock.png")
        assert resolve_sub_file(asset, truncate_path(asset, file)) == file

    def test_subfolder_named_like_directory(self) -> None:
        """Test that a subfolder repeating the directory's name collapses into it."""
        asset = Path("/game/pw-assets/materials/stone/stone.json")
        file = Path("/game/pw-assets/materials/stone/stone/tex.png")
        reference = truncate_path(asset, file)
        assert reference == "stone/tex.png"
        assert resolve_sub_file(asset, reference) == Path("/game/pw-assets/materials/stone/tex.png")

    def test_absolute_reference_sharing_directories(self) -> None:
        """Test that an absolute path inside the same tree is kept."""
        resolved = resolve_sub_file(Path("/game/pw-assets/props/a.json"), "/game/shared/b.obj")
        assert resolved == Path("/game/shared/b.obj")

    def test_absolute_reference_sharing_nothing(self) -> None:
        """Test that an unrelated absolute path is an error."""
        with pytest.raises(AssetPathError, match="shares no directories"):
            resolve_sub_file(Path("/game/pw-assets/props/a.json"), "/elsewhere/b.obj")

    def test_split_reference(self) -> None:
        """Test splitting on both separators."""
        assert split_reference("./a\\b//c.png") == ["a", "b", "c.png"]


class TestRemoveEmptyParents:
    """Test removal of emptied directories."""

    def test_stops_at_boundary(self) -> None:
        """Test that removal stops at the boundary and at non-empty directories."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir) / "maps"
            deep = root / "mars" / "textures"
            deep.mkdir(parents=True)
            file = deep / "rock.png"

            removed = remove_empty_parents(file, root)

            assert removed == [deep, root / "mars"]
            assert root.is_dir()

    def test_keeps_non_empty_directories(self) -> None:
        """Test that a directory with other content stays."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir) / "maps"
            (root / "mars" / "textures").mkdir(parents=True)
            (root / "mars" / "mars.json").touch()

            removed = remove_empty_parents(root / "mars" / "textures" / "rock.png", root)

            assert removed == [root / "mars" / "textures"]
            assert (root / "mars").is_dir()
