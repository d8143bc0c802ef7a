from __future__ import annotations

import getpass
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

DEFAULT_CONFIG_NAME = "setup_config.yaml"

DOCKER_GROUP_CONTAINER = "~/Library/Group Containers/group.com.docker"


@dataclass(frozen=True)
class SetupConfig:
    """Everything the setup steps need, resolved once at startup.

    ``workdir`` is the repository folder that gets bind-mounted into the
    container as ``/home/user``. All relative paths below are relative to it.
    """

    workdir: Path
    raw: Dict[str, Any]
    current_user: str = ""
    dry_run: bool = False

    @property
    def scripts_dir(self) -> Path:
        return self.workdir / "scripts"

    @property
    def user(self) -> str:
        return self.current_user or getpass.getuser()

    @property
    def hash_cache_path(self) -> Path:
        return self.workdir / str((self.raw.get("installer") or {}).get("hash_cache") or "hash")

    @property
    def versions_manifest(self) -> Optional[str]:
        return (self.raw.get("installer") or {}).get("versions_manifest")

    @property
    def known_checksums(self) -> Dict[str, str]:
        """Extra checksum -> version entries declared inline in the config."""
        return {str(k).lower(): str(v) for k, v in ((self.raw.get("installer") or {}).get("checksums") or {}).items()}

    @property
    def previous_install_dir(self) -> Path:
        return self.workdir / str((self.raw.get("installer") or {}).get("install_dir") or "Xilinx")

    @property
    def installer_extract_dir(self) -> Path:
        return self.workdir / "installer"

    @property
    def container_home(self) -> str:
        return str((self.raw.get("container") or {}).get("home") or "/home/user")

    @property
    def settings_candidates(self) -> List[Path]:
        docker = self.raw.get("docker") or {}
        candidates = docker.get("settings_candidates") or [
            f"{DOCKER_GROUP_CONTAINER}/settings-store.json",
            f"{DOCKER_GROUP_CONTAINER}/settings.json",
        ]
        return [Path(str(c)).expanduser() for c in candidates]

    @property
    def min_swap_mib(self) -> int:
        value = (self.raw.get("docker") or {}).get("min_swap_mib")
        return 4096 if value is None else int(value)

    @property
    def image(self) -> str:
        return str((self.raw.get("container") or {}).get("image") or "x64-linux")

    @property
    def container_name(self) -> str:
        return str((self.raw.get("container") or {}).get("name") or "vivado_container")

    @property
    def platform(self) -> str:
        return str((self.raw.get("container") or {}).get("platform") or "linux/amd64")

    @property
    def vnc_port(self) -> int:
        value = (self.raw.get("container") or {}).get("vnc_port")
        return 5901 if value is None else int(value)

    @property
    def install_script(self) -> str:
        return str((self.raw.get("container") or {}).get("install_script") or "scripts/install_vivado.sh")

    @property
    def default_resolution(self) -> str:
        return str((self.raw.get("vnc") or {}).get("default_resolution") or "1920x1080")

    @property
    def resolution_file(self) -> Path:
        return self.scripts_dir / "vnc_resolution"

    @property
    def install_bin_file(self) -> Path:
        return self.scripts_dir / "install_bin"

    @property
    def xvcd_binary(self) -> Path:
        return self.scripts_dir / "xvcd" / "bin" / "xvcd"

    @property
    def online_probe_host(self) -> str:
        return str((self.raw.get("network") or {}).get("probe_host") or "1.1.1.1")

    def relative_to_workdir(self, path: str | Path) -> str:
        """Map a host path under the workdir to its location inside the container."""
        rel = str(path)[len(str(self.workdir)):]
        return f"{self.container_home}{rel}"


def load_setup_config(
    workdir: str | Path,
    *,
    path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    current_user: str = "",
    dry_run: bool = False,
) -> SetupConfig:
    """Load the YAML config (if any) and build a ``SetupConfig``.

    An explicit ``path`` must exist; the default ``<workdir>/setup_config.yaml``
    is optional.
    """

    root = Path(workdir).expanduser().resolve()
    p = Path(path) if path else root / DEFAULT_CONFIG_NAME

    raw: Dict[str, Any] = {}
    if p.exists():
        if p.suffix.lower() not in {".yaml", ".yml"}:
            raise ValueError("setup config must be YAML")

        try:
            import yaml  # type: ignore
        except Exception as e:
            raise RuntimeError("PyYAML is required to read setup_config.yaml") from e

        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError("setup_config.yaml must contain a mapping/object")
    elif path:
        raise FileNotFoundError(path)

    for section, values in (overrides or {}).items():
        if isinstance(values, Mapping):
            raw.setdefault(section, {}).update({k: v for k, v in values.items() if v is not None})
        elif values is not None:
            raw[section] = values

    return SetupConfig(workdir=root, raw=raw, current_user=current_user, dry_run=dry_run)
