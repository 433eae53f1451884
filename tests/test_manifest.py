"""Tests for Manifest loading."""

import os
import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError
from vba_blocks_resolution import GitDependency
from vba_blocks_resolution import Manifest
from vba_blocks_resolution import ManifestError
from vba_blocks_resolution import PathDependency
from vba_blocks_resolution import VersionDependency
from vba_blocks_resolution import load_manifest


def test_from_toml_basic():
    """Test loading manifest without dependencies."""
    with tempfile.TemporaryDirectory() as tmpdir:
        toml_path = Path(tmpdir) / "vba-block.toml"
        toml_path.write_text("""
[package]
name = "my-package"
version = "1.0.0"
""")

        manifest = Manifest.from_toml(toml_path)

        assert manifest.name == "my-package"
        assert manifest.version == "1.0.0"
        assert manifest.dependencies == []
        assert manifest.dir == Path(tmpdir)


def test_from_toml_with_dependencies():
    """Test dependencies are parsed in order, paths relative to the manifest."""
    with tempfile.TemporaryDirectory() as tmpdir:
        toml_path = Path(tmpdir) / "vba-block.toml"
        toml_path.write_text("""
[package]
name = "app"
version = "0.1.0"

[dependencies]
a = "^1.0.0"
c = { path = "packages/c" }
g = { git = "https://github.com/author/g", rev = "a1b2c3d4" }
""")

        manifest = Manifest.from_toml(toml_path)

        a, c, g = manifest.dependencies
        assert isinstance(a, VersionDependency)
        assert isinstance(c, PathDependency)
        assert isinstance(g, GitDependency)
        assert c.path == os.path.join(os.path.abspath(tmpdir), "packages", "c") + os.sep
        assert g.rev == "a1b2c3d4"


def test_load_manifest_from_dir():
    """Test load_manifest finds vba-block.toml in a directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "vba-block.toml").write_text('[package]\nname = "a"\nversion = "2.0.0"\n')

        manifest = load_manifest(tmpdir)

        assert manifest.version == "2.0.0"


def test_from_toml_missing_file():
    """Test error when vba-block.toml doesn't exist."""
    with pytest.raises(ManifestError, match="not found"):
        Manifest.from_toml(Path("/nonexistent/vba-block.toml"))


def test_from_toml_missing_package_section():
    """Test error when [package] section is incomplete."""
    with tempfile.TemporaryDirectory() as tmpdir:
        toml_path = Path(tmpdir) / "vba-block.toml"
        toml_path.write_text('[package]\nname = "a"\n')

        with pytest.raises(ManifestError, match="name and version are required"):
            Manifest.from_toml(toml_path)


def test_from_toml_invalid_toml():
    """Test error when the file is not TOML."""
    with tempfile.TemporaryDirectory() as tmpdir:
        toml_path = Path(tmpdir) / "vba-block.toml"
        toml_path.write_text("[package\nname =")

        with pytest.raises(ManifestError, match="Invalid TOML"):
            Manifest.from_toml(toml_path)


def test_from_toml_invalid_dependency():
    """Test an invalid dependency aborts manifest loading."""
    with tempfile.TemporaryDirectory() as tmpdir:
        toml_path = Path(tmpdir) / "vba-block.toml"
        toml_path.write_text('[package]\nname = "a"\nversion = "1.0.0"\n\n[dependencies]\nb = { optional = true }\n')

        with pytest.raises(ManifestError, match='Invalid dependency "b"'):
            Manifest.from_toml(toml_path)


def test_manifest_immutable():
    """Test that manifest is frozen (immutable)."""
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "vba-block.toml").write_text('[package]\nname = "a"\nversion = "1.0.0"\n')

        manifest = load_manifest(tmpdir)

        with pytest.raises(ValidationError):
            manifest.name = "modified"


@pytest.mark.parametrize(
    "content",
    [
        'package = "x"\n',
        'dependencies = 1\n\n[package]\nname = "a"\nversion = "1.0.0"\n',
        'dependencies = "a"\n\n[package]\nname = "a"\nversion = "1.0.0"\n',
    ],
)
def test_from_toml_non_table_sections(content):
    """Test scalar [package] / [dependencies] values are manifest errors."""
    with tempfile.TemporaryDirectory() as tmpdir:
        toml_path = Path(tmpdir) / "vba-block.toml"
        toml_path.write_text(content)

        with pytest.raises(ManifestError, match="must be tables"):
            Manifest.from_toml(toml_path)
