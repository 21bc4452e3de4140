"""Linode machine driver.

``LinodeDriver`` implements the lifecycle contract a machine host drives:
flag enumeration, config binding, pre-create checks, create, the power
verbs, state and address lookups. It owns a single ``MachineConfig`` and
lazily builds a ``LinodeAPI`` from the stored token.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from . import ssh
from .config import MachineConfig
from .env import ensure_required
from .flags import CREATE_FLAGS, DriverOptions, Flag
from .linode_api import LinodeAPI, LinodeAPIError
from .network import select_public_ip
from .state import State, map_status

logger = logging.getLogger(__name__)

DRIVER_NAME = "linode"
DEFAULT_SSH_USER = "root"

DISK_JOB_TIMEOUT = 60
BOOT_JOB_TIMEOUT = 60
RUNNING_TIMEOUT = 120
RUNNING_POLL_INTERVAL = 3


class DriverError(RuntimeError):
    """Raised when the driver cannot complete an operation."""


class CreateStep(str, Enum):
    UNPROVISIONED = "unprovisioned"
    KEY_GENERATED = "key_generated"
    INSTANCE_ALLOCATED = "instance_allocated"
    LABELED = "labeled"
    DISK_CREATED = "disk_created"
    SWAP_CREATED = "swap_created"
    CONFIG_CREATED = "config_created"
    BOOTING = "booting"
    RUNNING = "running"


class LinodeDriver:
    def __init__(self, config: MachineConfig, api: Optional[LinodeAPI] = None) -> None:
        self.config = config
        self._api = api
        self.create_step = CreateStep.UNPROVISIONED

    def _get_api(self) -> LinodeAPI:
        if self._api is None:
            self._api = LinodeAPI(self.config.api_token)
        return self._api

    # Host contract -----------------------------------------------------

    def driver_name(self) -> str:
        return DRIVER_NAME

    def get_create_flags(self) -> List[Flag]:
        return list(CREATE_FLAGS)

    def set_config_from_flags(self, flags: DriverOptions) -> None:
        cfg = self.config
        cfg.api_token = flags.string("linode-token")
        cfg.region = flags.string("linode-region")
        cfg.instance_type = flags.string("linode-type")
        cfg.root_password = flags.string("linode-root-pass")
        cfg.ssh_port = flags.int("linode-ssh-port")
        cfg.image = flags.string("linode-image")
        cfg.kernel = flags.string("linode-kernel")
        cfg.instance_label = flags.string("linode-label")
        cfg.swap_size = flags.int("linode-swap-size")
        cfg.docker_port = flags.int("linode-docker-port")

        ensure_required(
            {"linode-token": cfg.api_token, "linode-root-pass": cfg.root_password},
            ["linode-token", "linode-root-pass"],
        )

    def pre_create_check(self) -> None:
        """Fail early when the region, type or image does not exist."""
        api = self._get_api()
        checks = (
            ("region", self.config.region, api.get_region),
            ("type", self.config.instance_type, api.get_type),
            ("image", self.config.image, api.get_image),
        )
        for kind, value, lookup in checks:
            try:
                lookup(value)
            except LinodeAPIError as exc:
                if exc.status == 404:
                    raise DriverError(f"Linode {kind} {value!r} does not exist") from exc
                raise

    def create(self) -> None:
        cfg = self.config
        logger.debug("Creating Linode machine instance...")

        public_key = ssh.create_ssh_key(self.get_ssh_key_path())
        self._advance(CreateStep.KEY_GENERATED)

        api = self._get_api()

        logger.debug("Creating linode instance in %s (%s)", cfg.region, cfg.instance_type)
        linode = api.create_instance(region=cfg.region, linode_type=cfg.instance_type)
        cfg.instance_id = linode["id"]
        self._advance(CreateStep.INSTANCE_ALLOCATED)

        if cfg.instance_label:
            logger.debug("Setting label %s", cfg.instance_label)
            api.update_instance(cfg.instance_id, label=cfg.instance_label)
            self._advance(CreateStep.LABELED)

        addresses = linode.get("ipv4") or api.instance_ipv4(cfg.instance_id)
        cfg.ip_address = select_public_ip(addresses)
        logger.debug("Created Linode Instance ID %s, IP address %s", cfg.instance_id, cfg.ip_address)

        root_disk = self._create_root_disk(api, linode, public_key)
        self._advance(CreateStep.DISK_CREATED)

        swap_disk = self._create_swap_disk(api)
        self._advance(CreateStep.SWAP_CREATED)

        logger.debug("Creating boot config with kernel %s", cfg.kernel)
        boot_config = api.create_config(
            cfg.instance_id,
            label=f"{cfg.image} profile",
            kernel=cfg.kernel,
            disk_ids=[root_disk["id"], swap_disk["id"]],
        )
        self._advance(CreateStep.CONFIG_CREATED)

        logger.debug("Booting Linode %s", cfg.instance_id)
        api.boot_instance(cfg.instance_id, boot_config["id"])
        self._advance(CreateStep.BOOTING)
        self._wait_for_job(api, "linode_boot", timeout=BOOT_JOB_TIMEOUT)

        logger.debug("Waiting for Machine Running...")
        api.wait_for_status(cfg.instance_id, "running", timeout=RUNNING_TIMEOUT, poll=RUNNING_POLL_INTERVAL)
        self._advance(CreateStep.RUNNING)
        logger.info("Linode %s is running at %s", cfg.instance_id, cfg.ip_address)

    def get_ip(self) -> str:
        if not self.config.ip_address:
            raise DriverError("IP address is not set")
        return self.config.ip_address

    def get_url(self) -> str:
        ip = self.get_ip()
        if not ip:
            return ""
        return f"tcp://{ip}:{self.config.docker_port}"

    def get_state(self) -> State:
        linode = self._get_api().get_instance(self._instance_id())
        return map_status(linode.get("status"))

    def start(self) -> None:
        logger.debug("Start...")
        self._get_api().boot_instance(self._instance_id())

    def stop(self) -> None:
        logger.debug("Stop...")
        self._get_api().shutdown_instance(self._instance_id())

    def restart(self) -> None:
        logger.debug("Restarting...")
        self._get_api().reboot_instance(self._instance_id())

    def kill(self) -> None:
        logger.debug("Killing...")
        self._get_api().shutdown_instance(self._instance_id())

    def remove(self) -> None:
        instance_id = self._instance_id()
        logger.debug("Removing linode: %s", instance_id)
        self._get_api().delete_instance(instance_id)

    def get_ssh_username(self) -> str:
        if not self.config.ssh_user:
            self.config.ssh_user = DEFAULT_SSH_USER
        return self.config.ssh_user

    def get_ssh_hostname(self) -> str:
        return self.get_ip()

    def get_ssh_port(self) -> int:
        return self.config.ssh_port

    def get_ssh_key_path(self) -> str:
        if not self.config.ssh_key_path:
            raise DriverError("SSH key path is not set")
        return self.config.ssh_key_path

    # Workflow steps ----------------------------------------------------

    def _create_root_disk(self, api: LinodeAPI, linode: Dict[str, Any], public_key: str) -> Dict[str, Any]:
        cfg = self.config
        plan_disk = (linode.get("specs") or {}).get("disk")
        if plan_disk is None:
            plan_disk = api.get_type(cfg.instance_type)["disk"]
        size = plan_disk - cfg.swap_size
        if size <= 0:
            raise DriverError(
                f"Swap size {cfg.swap_size}MB leaves no room for a root disk on {cfg.instance_type}"
            )

        logger.debug("Creating %sMB root disk from %s", size, cfg.image)
        disk = api.create_disk(
            cfg.instance_id,
            label=f"{cfg.image} disk",
            size=size,
            image=cfg.image,
            root_pass=cfg.root_password,
            authorized_keys=[public_key],
        )
        self._wait_for_job(api, "disk_create", entity_id=disk["id"], timeout=DISK_JOB_TIMEOUT)
        return disk

    def _create_swap_disk(self, api: LinodeAPI) -> Dict[str, Any]:
        cfg = self.config
        logger.debug("Creating %sMB swap disk", cfg.swap_size)
        disk = api.create_disk(
            cfg.instance_id,
            label=f"{cfg.swap_size}MB swap",
            size=cfg.swap_size,
            filesystem="swap",
        )
        self._wait_for_job(api, "disk_create", entity_id=disk["id"], timeout=DISK_JOB_TIMEOUT)
        return disk

    def _wait_for_job(self, api: LinodeAPI, action: str, entity_id: Optional[int] = None, timeout: int = 60) -> None:
        job = api.find_job(self.config.instance_id, action, entity_id=entity_id, timeout=timeout)
        logger.debug("Waiting for job %s (%s)", job.id, action)
        api.wait_for_job(job, timeout=timeout)

    def _advance(self, step: CreateStep) -> None:
        logger.debug("Create step: %s -> %s", self.create_step.value, step.value)
        self.create_step = step

    def _instance_id(self) -> int:
        if self.config.instance_id is None:
            raise DriverError(f"Machine {self.config.machine_name} has no Linode instance")
        return self.config.instance_id
