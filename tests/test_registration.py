"""Tests for registrations and source locators."""

import pytest
from vba_blocks_resolution import RegistryDependency
from vba_blocks_resolution import RegistryIndexError
from vba_blocks_resolution import get_registration_id
from vba_blocks_resolution import get_registration_source
from vba_blocks_resolution import parse_registration
from vba_blocks_resolution import parse_registration_source


def test_registration_id():
    assert get_registration_id("vba-blocks", "1.2.3") == "vba-blocks@1.2.3"


def test_registration_source_round_trip():
    """Test locator parts survive a build / parse cycle."""
    source = get_registration_source("registry", "https://github.com/vba-blocks/registry", "abc123")

    assert source == "registry+https://github.com/vba-blocks/registry#abc123"
    assert parse_registration_source(source) == ("registry", "https://github.com/vba-blocks/registry", "abc123")


def test_registration_source_without_details():
    source = get_registration_source("path", "/packages/c/")

    assert source == "path+/packages/c/"
    assert parse_registration_source(source) == ("path", "/packages/c/", None)


def test_parse_registration():
    """Test an index record becomes a Registration."""
    registration = parse_registration(
        {
            "name": "json",
            "vers": "1.1.0",
            "cksum": "deadbeef",
            "deps": [
                {"name": "dictionary", "req": "^1.0.0", "features": ["mac"], "optional": True, "defaultFeatures": False}
            ],
            "features": {"mac": ["dictionary"]},
        }
    )

    assert registration.id == "json@1.1.0"
    assert registration.kind == "registry"
    assert registration.origin == "https://github.com/vba-blocks/registry"
    assert registration.details == "deadbeef"

    (dependency,) = registration.dependencies
    assert dependency.name == "dictionary"
    assert dependency.features == ["mac"]
    assert dependency.optional is True
    assert dependency.default_features is False

    (feature,) = registration.features
    assert feature.name == "mac"
    assert feature.dependencies == ["dictionary"]
    assert feature.src == []
    assert feature.references == []


def test_registry_dependency_req_stays_a_range():
    """Test "req" maps to version_range, never to a concrete version."""
    dependency = RegistryDependency.model_validate({"name": "a", "req": "^1.0.0"})

    assert dependency.version_range == "^1.0.0"
    assert not hasattr(dependency, "version")
    assert dependency.model_dump(by_alias=True)["req"] == "^1.0.0"
    assert dependency.optional is False
    assert dependency.default_features is True


def test_parse_registration_missing_fields():
    """Test malformed records are rejected."""
    with pytest.raises(RegistryIndexError, match="Invalid index record"):
        parse_registration({"name": "a", "vers": "1.0.0"})

    with pytest.raises(RegistryIndexError):
        parse_registration({"name": "a", "vers": "1.0.0", "cksum": "x", "deps": [{"name": "b"}]})
