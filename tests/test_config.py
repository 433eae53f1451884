"""Tests for Config path and URL derivation."""

from pathlib import Path

from vba_blocks_resolution import Config
from vba_blocks_resolution import Registration
from vba_blocks_resolution import parse_registration


def registration():
    return parse_registration({"name": "json", "vers": "1.2.0", "cksum": "abc", "deps": [], "features": {}})


def test_from_cache_dir_layout(tmp_path):
    config = Config.from_cache_dir(tmp_path)

    assert config.registry.local == tmp_path / "registry"
    assert config.registry.remote == "https://github.com/vba-blocks/registry"
    assert config.git_dir == tmp_path / "git"


def test_resolve_locations_are_deterministic(tmp_path):
    """Test the same registration always maps to the same locations."""
    config = Config.from_cache_dir(tmp_path, packages="https://mirror.example.com/")

    assert config.resolve_remote_package(registration()) == "https://mirror.example.com/json/v1.2.0.block"
    assert config.resolve_local_package(registration()) == tmp_path / "packages" / "json" / "v1.2.0.block"
    assert config.resolve_source(registration()) == tmp_path / "sources" / "json" / "v1.2.0"


def test_default_under_home():
    assert Config.default().cache_dir == Path.home() / ".vba-blocks"


def test_git_sources_keyed_by_commit(tmp_path):
    """Test two commits declaring one version extract to different directories."""
    config = Config.from_cache_dir(tmp_path)
    first = Registration(id="g@1.0.0", source="git+https://github.com/author/g#aaa111", name="g", version="1.0.0")
    second = Registration(id="g@1.0.0", source="git+https://github.com/author/g#bbb222", name="g", version="1.0.0")

    assert config.resolve_source(first) == tmp_path / "sources" / "git" / "g" / "aaa111"
    assert config.resolve_source(first) != config.resolve_source(second)
    assert config.resolve_source(first) != config.resolve_source(registration())
