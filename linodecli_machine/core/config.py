"""The flat machine record shared by the driver and the store."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional


@dataclass
class MachineConfig:
    machine_name: str
    store_path: str = ""
    ssh_key_path: str = ""
    ssh_user: str = ""

    api_token: str = ""
    instance_id: Optional[int] = None
    instance_label: str = ""

    region: str = ""
    instance_type: str = ""
    root_password: str = ""
    image: str = ""
    kernel: str = ""
    swap_size: int = 0

    ip_address: str = ""
    ssh_port: int = 22
    docker_port: int = 2376

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MachineConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})
