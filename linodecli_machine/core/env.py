"""Environment file helpers and option validation errors."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Mapping, Tuple


class EnvError(RuntimeError):
    """Base configuration error."""


class MissingOptionError(EnvError):
    """Raised when required driver options are missing."""

    def __init__(self, missing: Iterable[str]) -> None:
        names = sorted(set(missing))
        flags = ", ".join(f"--{name}" for name in names)
        noun = "option" if len(names) == 1 else "options"
        super().__init__(f"linode driver requires the {flags} {noun}")
        self.names = names


class InvalidOptionError(EnvError):
    """Raised when an option value cannot be parsed."""


def load_env_file(path: str) -> Dict[str, str]:
    """Parse KEY=VALUE pairs from a dotenv-style file."""
    env_path = Path(path).expanduser()
    if not env_path.exists():
        raise EnvError(f"Env file not found: {env_path}")

    data: Dict[str, str] = {}
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        key, value = _split_env_line(line)
        data[key] = value
    return data


def ensure_required(values: Mapping[str, object], names: Iterable[str]) -> None:
    """Raise if any of the named options is empty."""
    missing = [name for name in names if not values.get(name)]
    if missing:
        raise MissingOptionError(missing)


def _split_env_line(line: str) -> Tuple[str, str]:
    if "=" not in line:
        raise EnvError(f"Invalid env line: {line}")
    key, value = line.split("=", 1)
    key = key.strip()
    value = value.strip()
    if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
        value = value[1:-1]
    return key, value
