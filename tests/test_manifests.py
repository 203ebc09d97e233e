import logging
from pathlib import Path

import pytest

from oxygen_launcher.errors import ManifestError
from oxygen_launcher.lib.manifests import (
    AddFeatures,
    AllFeatures,
    DefaultFeatures,
    Local,
    Manifest,
    NoFeatures,
    Registry,
    Remote,
    ReplaceFeatures,
    load_manifest,
    parse_features,
    parse_source,
)


def test_load_registry_manifest(write_manifest):
    manifest = load_manifest(str(write_manifest()))

    assert manifest == Manifest(name="demo", source=Registry("demo-pkg"), features=DefaultFeatures())


def test_load_remote_manifest_with_subpath_and_features(write_manifest):
    text = """
name: viewer
path:
  remote:
    url: https://example.com/viewer.git
    subpath: viewer-gui
features:
  replace: [wayland, gpu, wayland]
"""
    manifest = load_manifest(str(write_manifest(text)))

    assert manifest.source == Remote(url="https://example.com/viewer.git", subpath="viewer-gui")
    assert manifest.features == ReplaceFeatures(features=("wayland", "gpu"))


def test_features_default_when_omitted(write_manifest):
    manifest = load_manifest(str(write_manifest("name: demo\npath: {local: ./src/demo}\n")))

    assert manifest.source == Local(path=Path("./src/demo"))
    assert manifest.features == DefaultFeatures()


@pytest.mark.parametrize(
    "value,expected",
    [
        ("default", DefaultFeatures()),
        ("none", NoFeatures()),
        ("All", AllFeatures()),
        ({"add": ["serde"]}, AddFeatures(features=("serde",))),
        ({"add": "serde"}, AddFeatures(features=("serde",))),
        (None, DefaultFeatures()),
    ],
)
def test_parse_features(value, expected):
    assert parse_features(value) == expected


def test_remote_may_be_a_bare_url():
    assert parse_source({"remote": "https://example.com/x.git"}) == Remote(url="https://example.com/x.git")


@pytest.mark.parametrize(
    "value",
    [
        {"registry": ""},
        {"registry": None},
        {"remote": {"subpath": "x"}},
        {"ftp": "x"},
        {"registry": "a", "local": "b"},
        ["registry", "a"],
    ],
)
def test_bad_sources_are_manifest_errors(value):
    with pytest.raises(ManifestError):
        parse_source(value)


def test_unknown_feature_selection():
    with pytest.raises(ManifestError, match="Unknown feature selection"):
        parse_features("some")


def test_missing_argument():
    with pytest.raises(ManifestError, match="No manifest path found"):
        load_manifest(None)


def test_nonexistent_path(tmp_path):
    with pytest.raises(ManifestError, match="does not exist"):
        load_manifest(str(tmp_path / "nope.o2"))


def test_directory_path(tmp_path):
    with pytest.raises(ManifestError, match="directory"):
        load_manifest(str(tmp_path))


def test_malformed_yaml_names_the_file(write_manifest):
    p = write_manifest("name: [demo\n")

    with pytest.raises(ManifestError, match="Is the file corrupted"):
        load_manifest(str(p))


def test_non_mapping_content(write_manifest):
    with pytest.raises(ManifestError, match="mapping"):
        load_manifest(str(write_manifest("- a\n- b\n")))


def test_empty_name_is_rejected(write_manifest):
    with pytest.raises(ManifestError, match="name"):
        load_manifest(str(write_manifest("name: ''\npath: {registry: x}\n")))


def test_foreign_extension_only_warns(write_manifest, caplog):
    p = write_manifest(filename="demo.yaml")

    with caplog.at_level(logging.WARNING):
        manifest = load_manifest(str(p))

    assert manifest.name == "demo"
    assert "Foreign file extension" in caplog.text


def test_unreadable_file(tmp_path):
    p = tmp_path / "demo.o2"
    p.write_bytes(b"\xff\xfe name: demo")

    with pytest.raises(ManifestError, match="Failed to open manifest"):
        load_manifest(str(p))


def test_inaccessible_path_is_a_manifest_error(tmp_path):
    too_long = str(tmp_path / ("a" * 5000 + ".o2"))

    with pytest.raises(ManifestError, match="Cannot access manifest path|does not exist"):
        load_manifest(too_long)


@pytest.mark.parametrize("name", ["../../x", "bin/demo", "..\\demo", "..", ".", "x" * 300])
def test_name_must_be_a_plain_file_name(write_manifest, name):
    p = write_manifest(f"name: {name!r}\npath: {{registry: demo}}\n")

    with pytest.raises(ManifestError, match="name"):
        load_manifest(str(p))
