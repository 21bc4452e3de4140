import pytest

from linodecli_machine.core.network import (
    NoPublicAddressError,
    first_public_ip,
    is_private_ip,
    select_public_ip,
)


@pytest.mark.parametrize(
    "address, private",
    [
        ("10.0.0.1", True),
        ("10.255.255.255", True),
        ("172.16.0.1", True),
        ("172.31.255.254", True),
        ("172.32.0.1", False),
        ("172.15.255.255", False),
        ("192.168.128.10", True),
        ("192.169.0.1", False),
        ("45.33.12.7", False),
        ("2600:3c03::f03c:91ff:fe24:3a2f", False),
    ],
)
def test_is_private_ip(address, private):
    assert is_private_ip(address) is private


def test_select_returns_first_public_address():
    addresses = ["192.168.133.7", "45.33.12.7", "45.33.12.8"]
    assert select_public_ip(addresses) == "45.33.12.7"


def test_select_keeps_order_of_candidates():
    assert select_public_ip(["50.116.0.1", "45.33.12.7"]) == "50.116.0.1"


def test_select_never_returns_a_private_address():
    with pytest.raises(NoPublicAddressError, match="not found"):
        select_public_ip(["10.1.2.3", "172.20.0.4", "192.168.0.9"])


def test_select_fails_without_candidates():
    with pytest.raises(NoPublicAddressError):
        select_public_ip([])


def test_first_public_ip_returns_none_for_private_only():
    assert first_public_ip(["10.0.0.2"]) is None
