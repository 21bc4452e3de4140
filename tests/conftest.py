from __future__ import annotations

from collections import defaultdict, deque
from typing import Any, Dict, List, Optional, Tuple

import pytest

from linodecli_machine.core import linode_api
from linodecli_machine.core.config import MachineConfig
from linodecli_machine.core.linode_api import LinodeAPI


class FakeClock:
    """Stands in for the time module inside the poller."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: List[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeLinodeClient:
    """Routes raw linode_api4 calls to scripted responses.

    Each route holds a queue of responses; the last one repeats. A response
    may be an exception (raised) or a callable (called with the payload).
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], deque] = defaultdict(deque)
        self.calls: List[Tuple[str, str, Optional[Dict[str, Any]]]] = []

    def add(self, method: str, path: str, *responses: Any) -> "FakeLinodeClient":
        self.routes[(method, path)].extend(responses)
        return self

    def get(self, path: str, filters: Optional[Dict[str, Any]] = None):
        return self._dispatch("get", path, filters)

    def post(self, path: str, data: Optional[Dict[str, Any]] = None):
        return self._dispatch("post", path, data)

    def put(self, path: str, data: Optional[Dict[str, Any]] = None):
        return self._dispatch("put", path, data)

    def delete(self, path: str):
        return self._dispatch("delete", path, None)

    def paths(self, method: Optional[str] = None) -> List[str]:
        return [path for m, path, _ in self.calls if method is None or m == method]

    def _dispatch(self, method: str, path: str, payload: Optional[Dict[str, Any]]):
        self.calls.append((method, path, payload))
        queue = self.routes.get((method, path))
        if not queue:
            raise AssertionError(f"unexpected call: {method.upper()} {path}")
        response = queue.popleft() if len(queue) > 1 else queue[0]
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return response(payload)
        return response


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr(linode_api, "time", fake)
    return fake


@pytest.fixture
def client() -> FakeLinodeClient:
    return FakeLinodeClient()


@pytest.fixture
def api(client) -> LinodeAPI:
    return LinodeAPI("test-token", client=client)


@pytest.fixture
def machine(tmp_path) -> MachineConfig:
    return MachineConfig(
        machine_name="dev",
        store_path=str(tmp_path),
        ssh_key_path=str(tmp_path / "machines" / "dev" / "id_rsa"),
        api_token="test-token",
        root_password="hunter2hunter2",
        region="us-east",
        instance_type="g6-standard-4",
        image="linode/debian12",
        kernel="linode/grub2",
        swap_size=512,
        ssh_port=22,
        docker_port=2376,
    )


def event(
    event_id: int, action: str, status: str, instance_id: int = 123, disk_id: Optional[int] = None
) -> Dict[str, Any]:
    data = {
        "id": event_id,
        "action": action,
        "status": status,
        "entity": {"type": "linode", "id": instance_id, "label": f"linode{instance_id}"},
        "secondary_entity": None,
    }
    if disk_id is not None:
        data["secondary_entity"] = {"type": "disk", "id": disk_id, "label": f"disk{disk_id}"}
    return data


@pytest.fixture
def make_event():
    return event
