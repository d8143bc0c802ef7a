from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol


class VersionTable(Protocol):
    """Maps installer checksums to the Vivado version they belong to."""

    def lookup(self, checksum: str) -> Optional[str]:
        ...


class DictVersionTable:
    def __init__(self, entries: Mapping[str, str]) -> None:
        self._entries: Dict[str, str] = {str(k).strip().lower(): str(v) for k, v in entries.items()}

    def lookup(self, checksum: str) -> Optional[str]:
        return self._entries.get(checksum.strip().lower())

    def __len__(self) -> int:
        return len(self._entries)


def _package_root() -> Path:
    # vivado_host_setup/lib/versions.py -> vivado_host_setup
    return Path(__file__).resolve().parents[1]


DEFAULT_MANIFEST = "manifests/installer_versions.yaml"


def load_versions_manifest(path: Optional[str] = None) -> Dict[str, str]:
    """Load ``checksums: {<md5>: <version>}`` from a YAML manifest.

    Without ``path`` the manifest shipped inside the package is used.
    """
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML required to load the installer version manifest") from e

    p = Path(path).expanduser() if path else _package_root() / DEFAULT_MANIFEST
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Manifest must be a mapping/dict: {p}")
    checksums = data.get("checksums") or {}
    if not isinstance(checksums, dict):
        raise ValueError(f"'checksums' must be a mapping in {p}")
    return {str(k): str(v) for k, v in checksums.items()}


class ManifestVersionTable(DictVersionTable):
    def __init__(self, path: Optional[str] = None, extra: Optional[Mapping[str, str]] = None) -> None:
        entries = load_versions_manifest(path)
        entries.update(extra or {})
        super().__init__(entries)
