from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

from roommatetap.config.errors import MissingBaseConfig, MissingOverlayConfig

logger = logging.getLogger(__name__)

MAIN_DOCUMENT = "main"
LOCAL_ENVIRONMENT = "env"
DOCUMENT_SUFFIXES = (".yml", ".yaml")

# Legacy document keys and the key they are read as.
KEY_ALIASES: dict[tuple[str, str], str] = {
    ("http", "maxHeaderBytes"): "maxHeaderMegabytes",
}


def deep_merge(base: MutableMapping[str, Any], override: Mapping[str, Any]) -> None:
    """
    Merge ``override`` into ``base`` key path by key path. Nested mappings are merged, anything
    else replaced. A null value (an empty YAML section or key) leaves an existing base value alone.
    """
    for k, v in override.items():
        if v is None and k in base:
            continue
        if isinstance(v, Mapping) and isinstance(base.get(k), MutableMapping):
            deep_merge(base[k], v)
            continue
        base[k] = copy.deepcopy(v)


def canonicalize_keys(tree: dict[str, Any]) -> dict[str, Any]:
    """Rename legacy keys in one document so they merge with the keys the defaults use."""
    for (section, legacy), canonical in KEY_ALIASES.items():
        group = tree.get(section)
        if not isinstance(group, MutableMapping) or legacy not in group:
            continue
        value = group.pop(legacy)
        group.setdefault(canonical, value)
    return tree


def find_document(configs_dir: Path, name: str) -> Optional[Path]:
    if not name or Path(name).name != name:
        return None
    for suffix in DOCUMENT_SUFFIXES:
        candidate = configs_dir / f"{name}{suffix}"
        if candidate.is_file():
            return candidate
    return None


def read_document(path: Path) -> dict[str, Any]:
    try:
        import yaml  # type: ignore[import-not-found]
    except ModuleNotFoundError as e:  # pragma: no cover
        raise ModuleNotFoundError(
            "Missing dependency: PyYAML is required to load config documents. Install 'PyYAML'."
        ) from e

    raw = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Top-level YAML must be a mapping, got: {type(data).__name__}")
    return data


def _read_base(configs_dir: Path) -> dict[str, Any]:
    path = find_document(configs_dir, MAIN_DOCUMENT)
    if path is None:
        raise MissingBaseConfig(configs_dir / f"{MAIN_DOCUMENT}{DOCUMENT_SUFFIXES[0]}", "not found")
    try:
        return canonicalize_keys(read_document(path))
    except (OSError, ValueError) as e:
        raise MissingBaseConfig(path, str(e)) from e


def _read_overlay(configs_dir: Path, environment: str) -> dict[str, Any]:
    path = find_document(configs_dir, environment)
    if path is None:
        reason = "not found" if environment else "APP_ENV is not set"
        raise MissingOverlayConfig(environment, configs_dir, reason)
    try:
        return canonicalize_keys(read_document(path))
    except (OSError, ValueError) as e:
        raise MissingOverlayConfig(environment, configs_dir, str(e)) from e


def load_documents(configs_dir: Path, environment: str) -> dict[str, Any]:
    """
    Read the base document and, outside the local environment, merge the overlay named
    after ``environment`` over it.
    """
    tree = _read_base(configs_dir)
    if environment == LOCAL_ENVIRONMENT:
        logger.debug("config.documents_loaded dir=%s overlay=None", configs_dir)
        return tree

    overlay = _read_overlay(configs_dir, environment)
    deep_merge(tree, overlay)
    logger.debug("config.documents_loaded dir=%s overlay=%s", configs_dir, environment)
    return tree
