"""Machine store: one YAML record per machine under the store root.

Layout::

    <root>/machines/<name>/config.yml
    <root>/machines/<name>/id_rsa
    <root>/machines/<name>/id_rsa.pub
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Optional

import yaml

from .config import MachineConfig

CONFIG_FILE = "config.yml"


class StoreError(RuntimeError):
    """Raised for store issues."""


class MachineNotFoundError(StoreError):
    """Raised when no record exists for a machine name."""


def default_store_path() -> Path:
    """Return the default store root."""
    return Path.home() / ".config" / "linode-cli.d" / "machine"


class MachineStore:
    def __init__(self, root: Optional[str] = None) -> None:
        self.root = Path(root).expanduser() if root else default_store_path()

    def machine_dir(self, name: str) -> Path:
        return self.root / "machines" / name

    def exists(self, name: str) -> bool:
        return (self.machine_dir(name) / CONFIG_FILE).exists()

    def new(self, name: str) -> MachineConfig:
        """Create an empty record the way the host hands one to the driver."""
        if self.exists(name):
            raise StoreError(f"Machine {name} already exists")
        return MachineConfig(
            machine_name=name,
            store_path=str(self.root),
            ssh_key_path=str(self.machine_dir(name) / "id_rsa"),
        )

    def save(self, config: MachineConfig) -> Path:
        path = self.machine_dir(config.machine_name) / CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(config.to_dict(), sort_keys=False), encoding="utf-8")
        path.chmod(0o600)
        return path

    def load(self, name: str) -> MachineConfig:
        path = self.machine_dir(name) / CONFIG_FILE
        if not path.exists():
            raise MachineNotFoundError(f"Machine {name} does not exist")
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise StoreError(f"Machine record must be a YAML mapping: {path}")
        return MachineConfig.from_dict(data)

    def list_names(self) -> List[str]:
        machines = self.root / "machines"
        if not machines.is_dir():
            return []
        return sorted(entry.name for entry in machines.iterdir() if (entry / CONFIG_FILE).exists())

    def remove(self, name: str) -> None:
        path = self.machine_dir(name)
        if not path.exists():
            raise MachineNotFoundError(f"Machine {name} does not exist")
        shutil.rmtree(path)
