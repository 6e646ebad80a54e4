import json

import pytest

from repofetch.manifest import Manifest, ManifestType, get_manifests

CARGO_FIXTURE = """\
[package]
name = "project"
version = "0.1.0"
edition = "2018"
description = "this is a description"
license = "MIT"

[dependencies]
cortex-m-rtic = "0.6.0-alpha.1"
anyhow = "1.0"

[dependencies.cortex-m]
version = "0.7.1"

[dependencies.cortex-m-rt]
version = "0.6.11"

[dependencies.stm32f4xx-hal]
version = "0.8.3"
features = ["rt", "stm32f401"]
"""

NPM_FIXTURE = {
    "name": "my_package",
    "version": "1.0.0",
    "description": "description for my_package",
    "main": "index.js",
    "license": "ISC",
    "dependencies": {"express": "^4.17.1", "lodash": "^4.17.21", "chalk": "^4.1.2"},
    "devDependencies": {"jest": "^27.0.0"},
}


def test_should_detect_and_parse_cargo_manifest(tmp_path):
    (tmp_path / "Cargo.toml").write_text(CARGO_FIXTURE, encoding="utf-8")
    manifests = get_manifests(tmp_path)
    assert len(manifests) == 1
    cargo_manifest = manifests[0]
    assert cargo_manifest.manifest_type is ManifestType.CARGO
    assert cargo_manifest.number_of_dependencies == 5
    assert cargo_manifest.name == "project"
    assert cargo_manifest.description == "this is a description"
    assert cargo_manifest.version == "0.1.0"
    assert cargo_manifest.license == "MIT"


def test_should_detect_and_parse_npm_manifest(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps(NPM_FIXTURE), encoding="utf-8")
    manifests = get_manifests(tmp_path)
    assert len(manifests) == 1
    npm_manifest = manifests[0]
    assert npm_manifest.manifest_type is ManifestType.NPM
    assert npm_manifest.number_of_dependencies == 3
    assert npm_manifest.name == "my_package"
    assert npm_manifest.description == "description for my_package"
    assert npm_manifest.version == "1.0.0"
    assert npm_manifest.license == "ISC"


def test_both_manifests_detected(tmp_path):
    (tmp_path / "Cargo.toml").write_text(CARGO_FIXTURE, encoding="utf-8")
    (tmp_path / "package.json").write_text(json.dumps(NPM_FIXTURE), encoding="utf-8")
    types = {m.manifest_type for m in get_manifests(tmp_path)}
    assert types == {ManifestType.CARGO, ManifestType.NPM}


def test_workspace_only_cargo_manifest_is_skipped(tmp_path):
    (tmp_path / "Cargo.toml").write_text('[workspace]\nmembers = ["a"]\n', encoding="utf-8")
    assert get_manifests(tmp_path) == []


def test_invalid_npm_manifest_is_skipped(tmp_path):
    (tmp_path / "package.json").write_text("{ not json", encoding="utf-8")
    assert get_manifests(tmp_path) == []


def test_unrelated_files_and_directories_are_ignored(tmp_path):
    (tmp_path / "README.md").write_text("hello", encoding="utf-8")
    (tmp_path / "package.json").mkdir()
    assert get_manifests(tmp_path) == []


def test_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        get_manifests(tmp_path / "absent")


def test_npm_manifest_without_description_or_license(tmp_path):
    data = {"name": "pkg", "version": "2.0.0"}
    (tmp_path / "package.json").write_text(json.dumps(data), encoding="utf-8")
    assert get_manifests(tmp_path) == [
        Manifest(
            manifest_type=ManifestType.NPM,
            number_of_dependencies=0,
            name="pkg",
            description=None,
            version="2.0.0",
            license=None,
        )
    ]


def test_manifest_type_display_and_order(tmp_path):
    cargo_dir = tmp_path / "cargo"
    cargo_dir.mkdir()
    (cargo_dir / "Cargo.toml").write_text(CARGO_FIXTURE, encoding="utf-8")
    npm_dir = tmp_path / "npm"
    npm_dir.mkdir()
    (npm_dir / "package.json").write_text(json.dumps(NPM_FIXTURE), encoding="utf-8")

    assert [str(m.manifest_type) for m in get_manifests(cargo_dir)] == ["Cargo"]
    assert [str(m.manifest_type) for m in get_manifests(npm_dir)] == ["Npm"]
    assert list(ManifestType) == [ManifestType.NPM, ManifestType.CARGO]