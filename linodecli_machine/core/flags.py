"""Create flags and their resolution against explicit values and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from .env import InvalidOptionError

FlagValue = Union[str, int, None]


@dataclass(frozen=True)
class Flag:
    name: str
    env_var: str
    usage: str
    default: FlagValue = None
    kind: type = str

    @property
    def dest(self) -> str:
        """argparse destination for the flag."""
        return self.name.replace("-", "_")


CREATE_FLAGS: List[Flag] = [
    Flag("linode-token", "LINODE_TOKEN", "Linode API Token"),
    Flag("linode-root-pass", "LINODE_ROOT_PASSWORD", "Root Password"),
    Flag("linode-label", "LINODE_LABEL", "Linode Instance Label"),
    # us-central, ap-south, eu-central, ...
    Flag("linode-region", "LINODE_REGION", "Linode Region", "us-east"),
    # g6-nanode-1, g6-highmem-2, ...
    Flag("linode-type", "LINODE_INSTANCE_TYPE", "Linode Instance Type", "g6-standard-4"),
    Flag("linode-ssh-port", "LINODE_SSH_PORT", "Linode Instance SSH Port", 22, int),
    # linode/ubuntu24.04, linode/arch, ...
    Flag("linode-image", "LINODE_IMAGE", "Linode Instance Image", "linode/debian12"),
    # linode/latest-64bit, ...
    Flag("linode-kernel", "LINODE_KERNEL", "Linode Instance Kernel", "linode/grub2"),
    Flag("linode-docker-port", "LINODE_DOCKER_PORT", "Docker Port", 2376, int),
    Flag("linode-swap-size", "LINODE_SWAP_SIZE", "Linode Instance Swap Size (MB)", 512, int),
]


class DriverOptions:
    """Looks up flag values: explicit value first, then env var, then default."""

    def __init__(
        self,
        values: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
        flags: Optional[List[Flag]] = None,
    ) -> None:
        self._values = dict(values or {})
        self._environ = os.environ if environ is None else environ
        self._flags: Dict[str, Flag] = {flag.name: flag for flag in (flags or CREATE_FLAGS)}

    def string(self, name: str) -> str:
        value = self._lookup(name)
        return "" if value is None else str(value)

    def int(self, name: str) -> int:
        value = self._lookup(name)
        if value is None or value == "":
            return 0
        try:
            return int(value)
        except (TypeError, ValueError):
            raise InvalidOptionError(f"--{name} expects an integer, got {value!r}") from None

    def _lookup(self, name: str) -> FlagValue:
        flag = self._flags.get(name)
        explicit = self._values.get(name)
        if explicit is None and flag is not None:
            explicit = self._values.get(flag.dest)
        if explicit not in (None, ""):
            return explicit
        if flag is None:
            return None
        env_value = self._environ.get(flag.env_var)
        if env_value:
            return env_value
        return flag.default
