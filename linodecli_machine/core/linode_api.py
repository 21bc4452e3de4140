"""Thin Linode API wrapper over the linode_api4 client."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from linode_api4 import LinodeClient
from linode_api4.errors import ApiError

logger = logging.getLogger(__name__)

JOB_POLL_INTERVAL = 1
STATUS_POLL_INTERVAL = 3


class LinodeAPIError(RuntimeError):
    """Raised when API operations fail."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class JobFailedError(LinodeAPIError):
    """Raised when an asynchronous job reports failure."""


class JobNotFoundError(LinodeAPIError):
    """Raised when a job vanished or no longer matches its instance."""


class JobTimeoutError(LinodeAPIError):
    """Raised when a job does not finish in time."""


class StatusTimeoutError(LinodeAPIError):
    """Raised when an instance does not reach a status in time."""


@dataclass(frozen=True)
class Job:
    """An asynchronous operation tracked by the account event log."""

    id: int
    instance_id: int
    action: str
    entity_id: Optional[int] = None


class LinodeAPI:
    def __init__(self, token: str, client: Optional[LinodeClient] = None) -> None:
        if not token:
            raise LinodeAPIError("Linode API token is not set")
        self._client = client if client is not None else LinodeClient(token)

    # Instances ---------------------------------------------------------

    def create_instance(self, *, region: str, linode_type: str) -> Dict[str, Any]:
        payload = {"region": region, "type": linode_type}
        return self._request("post", "/linode/instances", payload)

    def get_instance(self, instance_id: int) -> Dict[str, Any]:
        return self._request("get", f"/linode/instances/{instance_id}")

    def update_instance(self, instance_id: int, **fields: Any) -> Dict[str, Any]:
        return self._request("put", f"/linode/instances/{instance_id}", fields)

    def delete_instance(self, instance_id: int) -> None:
        self._request("delete", f"/linode/instances/{instance_id}")

    def boot_instance(self, instance_id: int, config_id: Optional[int] = None) -> None:
        payload = {"config_id": config_id} if config_id else None
        self._request("post", f"/linode/instances/{instance_id}/boot", payload)

    def shutdown_instance(self, instance_id: int) -> None:
        self._request("post", f"/linode/instances/{instance_id}/shutdown")

    def reboot_instance(self, instance_id: int) -> None:
        self._request("post", f"/linode/instances/{instance_id}/reboot")

    def instance_ipv4(self, instance_id: int) -> List[str]:
        data = self._request("get", f"/linode/instances/{instance_id}/ips")
        ipv4 = data.get("ipv4", {})
        addresses = [entry["address"] for entry in ipv4.get("public", [])]
        addresses.extend(entry["address"] for entry in ipv4.get("private", []))
        return addresses

    # Disks and configs -------------------------------------------------

    def create_disk(
        self,
        instance_id: int,
        *,
        label: str,
        size: int,
        image: Optional[str] = None,
        root_pass: Optional[str] = None,
        authorized_keys: Optional[List[str]] = None,
        filesystem: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"label": label, "size": size}
        if image:
            payload["image"] = image
            payload["root_pass"] = root_pass
            payload["authorized_keys"] = authorized_keys or []
        if filesystem:
            payload["filesystem"] = filesystem
        return self._request("post", f"/linode/instances/{instance_id}/disks", payload)

    def create_config(
        self,
        instance_id: int,
        *,
        label: str,
        kernel: str,
        disk_ids: List[int],
        root_device: str = "/dev/sda",
        distro_helper: bool = True,
    ) -> Dict[str, Any]:
        slots = ("sda", "sdb", "sdc", "sdd", "sde", "sdf", "sdg", "sdh")
        devices = {slot: {"disk_id": disk_id} for slot, disk_id in zip(slots, disk_ids)}
        payload = {
            "label": label,
            "kernel": kernel,
            "devices": devices,
            "root_device": root_device,
            "helpers": {"distro": distro_helper},
        }
        return self._request("post", f"/linode/instances/{instance_id}/configs", payload)

    # Catalog -----------------------------------------------------------

    def get_type(self, linode_type: str) -> Dict[str, Any]:
        return self._request("get", f"/linode/types/{linode_type}")

    def get_region(self, region: str) -> Dict[str, Any]:
        return self._request("get", f"/regions/{region}")

    def get_image(self, image: str) -> Dict[str, Any]:
        return self._request("get", f"/images/{image}")

    # Jobs --------------------------------------------------------------

    def find_job(
        self,
        instance_id: int,
        action: str,
        entity_id: Optional[int] = None,
        timeout: int = 60,
        poll: int = JOB_POLL_INTERVAL,
    ) -> Job:
        """Return the most recent event for ``action`` on the instance.

        ``entity_id`` pins the event to its secondary entity (the disk of a
        ``disk_create``). Events show up in the log some time after the
        request that caused them, so the lookup is retried every ``poll``
        seconds until ``timeout``.
        """
        filters = {
            "+order_by": "created",
            "+order": "desc",
            "action": action,
            "entity.type": "linode",
            "entity.id": instance_id,
        }
        deadline = time.time() + timeout
        while True:
            data = self._request("get", "/account/events", filters=filters)
            for event in data.get("data", []):
                if _event_matches(event, instance_id, action, entity_id):
                    return Job(id=event["id"], instance_id=instance_id, action=action, entity_id=entity_id)
            if time.time() >= deadline:
                break
            logger.debug("No %s job for Linode %s yet, waiting", action, instance_id)
            time.sleep(poll)
        raise JobTimeoutError(
            f"No {action} job appeared for Linode {instance_id} within {timeout}s"
        )

    def get_job(self, job: Job) -> Dict[str, Any]:
        try:
            event = self._request("get", f"/account/events/{job.id}")
        except LinodeAPIError as exc:
            if exc.status == 404:
                raise JobNotFoundError(f"Job {job.id} not found", status=404) from exc
            raise
        if not _event_matches(event, job.instance_id, job.action, job.entity_id):
            raise JobNotFoundError(
                f"Job {job.id} does not belong to Linode {job.instance_id}"
            )
        return event

    # Helpers -----------------------------------------------------------

    def wait_for_job(self, job: Job, timeout: int = 60, poll: int = JOB_POLL_INTERVAL) -> Dict[str, Any]:
        """Poll a job until it finishes, fails, disappears or times out."""
        deadline = time.time() + timeout
        while True:
            event = self.get_job(job)
            status = event.get("status")
            if status == "finished":
                return event
            if status == "failed":
                raise JobFailedError(
                    f"Job {job.id} ({job.action}) failed for Linode {job.instance_id}"
                )
            if time.time() >= deadline:
                break
            logger.debug("Job %s (%s) is %s, waiting", job.id, job.action, status)
            time.sleep(poll)
        raise JobTimeoutError(
            f"Job {job.id} ({job.action}) did not finish within {timeout}s"
        )

    def wait_for_status(
        self, instance_id: int, desired: str = "running", timeout: int = 120, poll: int = STATUS_POLL_INTERVAL
    ) -> Dict[str, Any]:
        """Poll Linode until it reaches the desired status or timeout."""
        deadline = time.time() + timeout
        while True:
            data = self.get_instance(instance_id)
            if data.get("status") == desired:
                return data
            if time.time() >= deadline:
                break
            time.sleep(poll)
        raise StatusTimeoutError(
            f"Linode {instance_id} did not reach status {desired} within {timeout}s"
        )

    def _request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        filters: Optional[Dict[str, Any]] = None,
    ):
        client_method = getattr(self._client, method, None)
        if client_method is None:
            raise LinodeAPIError(f"linode_api4 client missing method {method}")
        kwargs: Dict[str, Any] = {}
        if payload is not None:
            kwargs["data"] = payload
        if filters is not None:
            kwargs["filters"] = filters
        logger.debug("%s %s", method.upper(), path)
        try:
            response = client_method(path, **kwargs)
        except ApiError as exc:
            raise LinodeAPIError(str(exc), status=exc.status) from exc
        if isinstance(response, dict) and response.get("errors"):
            raise LinodeAPIError(str(response["errors"]))
        return response if response is not None else {}


def _event_matches(
    event: Dict[str, Any], instance_id: int, action: str, entity_id: Optional[int] = None
) -> bool:
    entity = event.get("entity") or {}
    if not (
        event.get("action") == action
        and entity.get("type") == "linode"
        and entity.get("id") == instance_id
    ):
        return False
    if entity_id is None:
        return True
    return (event.get("secondary_entity") or {}).get("id") == entity_id
