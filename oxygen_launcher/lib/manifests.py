from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from ..errors import ManifestError

logger = logging.getLogger(__name__)

MANIFEST_SUFFIX = ".o2"
# Leaves room for ".exe" within the usual 255-byte file name limit.
MAX_NAME_LENGTH = 250


@dataclass(frozen=True)
class Registry:
    identifier: str


@dataclass(frozen=True)
class Remote:
    url: str
    subpath: Optional[str] = None


@dataclass(frozen=True)
class Local:
    path: Path


PackageSource = Union[Registry, Remote, Local]


@dataclass(frozen=True)
class DefaultFeatures:
    pass


@dataclass(frozen=True)
class NoFeatures:
    pass


@dataclass(frozen=True)
class AllFeatures:
    pass


@dataclass(frozen=True)
class AddFeatures:
    features: Tuple[str, ...]


@dataclass(frozen=True)
class ReplaceFeatures:
    features: Tuple[str, ...]


FeatureSelection = Union[DefaultFeatures, NoFeatures, AllFeatures, AddFeatures, ReplaceFeatures]


@dataclass(frozen=True)
class Manifest:
    name: str
    source: PackageSource
    features: FeatureSelection = DefaultFeatures()


def _single_tag(value: Any, what: str) -> Tuple[str, Any]:
    """Split a one-key mapping ``{tag: payload}`` (or a bare scalar tag)."""
    if isinstance(value, str):
        return value.strip().lower(), None
    if isinstance(value, dict) and len(value) == 1:
        (tag, payload), = value.items()
        return str(tag).strip().lower(), payload
    raise ManifestError(f"'{what}' must be a single tag like {{tag: value}}, got {value!r}")


def _feature_names(payload: Any, tag: str) -> Tuple[str, ...]:
    if isinstance(payload, str):
        payload = [payload]
    if not isinstance(payload, list):
        raise ManifestError(f"features.{tag} must be a list of feature names")
    names: list[str] = []
    for item in payload:
        name = str(item).strip()
        if name and name not in names:
            names.append(name)
    return tuple(names)


def parse_source(value: Any) -> PackageSource:
    tag, payload = _single_tag(value, "path")
    if payload is None:
        raise ManifestError(f"path.{tag} needs a value")

    if tag == "registry":
        identifier = str(payload).strip()
        if not identifier:
            raise ManifestError("path.registry needs a package name")
        return Registry(identifier=identifier)
    if tag == "remote":
        if isinstance(payload, str):
            return Remote(url=payload.strip())
        if not isinstance(payload, dict) or not payload.get("url"):
            raise ManifestError("path.remote needs a 'url'")
        subpath = payload.get("subpath")
        return Remote(url=str(payload["url"]).strip(), subpath=str(subpath) if subpath else None)
    if tag == "local":
        return Local(path=Path(str(payload)))

    raise ManifestError(f"Unknown package source '{tag}' (expected registry|remote|local)")


def parse_features(value: Any) -> FeatureSelection:
    if value is None:
        return DefaultFeatures()

    tag, payload = _single_tag(value, "features")
    if tag == "default":
        return DefaultFeatures()
    if tag == "none":
        return NoFeatures()
    if tag == "all":
        return AllFeatures()
    if tag == "add":
        return AddFeatures(features=_feature_names(payload, tag))
    if tag == "replace":
        return ReplaceFeatures(features=_feature_names(payload, tag))

    raise ManifestError(f"Unknown feature selection '{tag}' (expected default|none|all|add|replace)")


def parse_manifest(data: Dict[str, Any]) -> Manifest:
    name = str(data.get("name") or "").strip()
    if not name:
        raise ManifestError("Manifest 'name' is missing or empty")
    # The name becomes a file under <install_root>/bin and nowhere else.
    if name in {".", ".."} or any(sep in name for sep in ("/", "\\")):
        raise ManifestError(f"Manifest 'name' must be a plain file name, got {name!r}")
    if len(name) > MAX_NAME_LENGTH:
        raise ManifestError(f"Manifest 'name' is longer than {MAX_NAME_LENGTH} characters")
    if "path" not in data:
        raise ManifestError("Manifest 'path' (package source) is missing")

    return Manifest(
        name=name,
        source=parse_source(data["path"]),
        features=parse_features(data.get("features")),
    )


def load_manifest(path: Optional[str]) -> Manifest:
    """Load and validate a manifest file.

    Raises ManifestError for anything that prevents a fully-populated Manifest.
    A foreign extension only warns.
    """

    if path is None:
        raise ManifestError("No manifest path found")

    p = Path(path)
    try:
        exists, is_dir = p.exists(), p.is_dir()
    except OSError as e:
        raise ManifestError(f"Cannot access manifest path '{p}'\n{e}") from e
    if not exists:
        raise ManifestError(f"Supplied manifest path does not exist: {p}")
    if is_dir:
        raise ManifestError(f"Supplied manifest path is a directory, not a file: {p}")
    if p.suffix.lower() != MANIFEST_SUFFIX:
        logger.warning("Foreign file extension '%s' (expected %s), loading anyway", p.suffix, MANIFEST_SUFFIX)

    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Failed to open manifest at '{p}'\n{e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ManifestError(f"Failed to read manifest at '{p}'. Is the file corrupted?\n{e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest must be a mapping/dict: {p}")

    try:
        return parse_manifest(data)
    except ManifestError as e:
        raise ManifestError(f"Invalid manifest at '{p}'\n{e}") from e

