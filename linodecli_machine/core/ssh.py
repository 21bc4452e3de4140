"""SSH keypair helpers."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

PUBLIC_KEY_SUFFIX = ".pub"


class SSHKeyError(RuntimeError):
    """Raised when the machine keypair cannot be generated or read."""


def public_key_path(private_key_path: str) -> str:
    """The public key always sits next to the private key with a .pub suffix."""
    return private_key_path + PUBLIC_KEY_SUFFIX


def generate_ssh_key(private_key_path: str, bits: int = 2048) -> None:
    """Create an RSA keypair at ``private_key_path`` unless one already exists."""
    key_path = Path(private_key_path)
    if key_path.exists():
        logger.debug("Reusing SSH key %s", key_path)
        return

    keygen = shutil.which("ssh-keygen")
    if keygen is None:
        raise SSHKeyError(
            "ssh-keygen not found on PATH; install the OpenSSH client "
            "(the openssh-client package on Debian and Ubuntu)"
        )

    key_path.parent.mkdir(parents=True, exist_ok=True)
    result = subprocess.run(
        [keygen, "-q", "-t", "rsa", "-b", str(bits), "-N", "", "-C", key_path.parent.name, "-f", str(key_path)],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise SSHKeyError(f"ssh-keygen failed: {result.stderr.strip()}")
    key_path.chmod(0o600)
    logger.debug("Generated SSH key %s", key_path)


def read_public_key(private_key_path: str) -> str:
    path = Path(public_key_path(private_key_path))
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise SSHKeyError(f"Cannot read public key {path}: {exc}") from exc


def create_ssh_key(private_key_path: str) -> str:
    """Generate the keypair if needed and return the public key."""
    generate_ssh_key(private_key_path)
    return read_public_key(private_key_path)
