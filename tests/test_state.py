import pytest

from linodecli_machine.core.state import LEGACY_STATUS_CODES, STATUS_NAMES, State, map_status


@pytest.mark.parametrize(
    "code, expected",
    [
        (-2, State.ERROR),
        (-1, State.STARTING),
        (0, State.STARTING),
        (1, State.RUNNING),
        (2, State.STOPPED),
        (3, State.STOPPING),
        (4, State.STOPPED),
    ],
)
def test_legacy_codes(code, expected):
    assert map_status(code) is expected


@pytest.mark.parametrize(
    "status, expected",
    [
        ("running", State.RUNNING),
        ("booting", State.STARTING),
        ("rebooting", State.STARTING),
        ("provisioning", State.STARTING),
        ("shutting_down", State.STOPPING),
        ("deleting", State.STOPPING),
        ("offline", State.STOPPED),
        ("stopped", State.STOPPED),
        ("failed", State.ERROR),
    ],
)
def test_named_statuses(status, expected):
    assert map_status(status) is expected


@pytest.mark.parametrize("status", ["migrating", "cloning", "restoring", "rebuilding", "resizing", "bogus"])
def test_transitional_and_unknown_statuses_map_to_none(status):
    assert map_status(status) is State.NONE


@pytest.mark.parametrize("status", [None, 5, -3, 99, True, 1.0, ""])
def test_unrecognised_values_map_to_none(status):
    assert map_status(status) is State.NONE


def test_named_status_is_case_insensitive():
    assert map_status("  Running ") is State.RUNNING


def test_every_known_status_maps_to_the_vocabulary():
    vocabulary = set(State)
    for code in LEGACY_STATUS_CODES:
        assert map_status(code) in vocabulary
    for name in STATUS_NAMES:
        assert map_status(name) in vocabulary


def test_state_prints_as_its_value():
    assert str(State.RUNNING) == "running"
