import pytest

from src.domain.instance.instance_status import InstanceStatus, translate_status
from src.domain.instance.value_objects import ResourceSnapshot


@pytest.mark.parametrize("state, started, expected", [
    ("NORMAL", True, InstanceStatus.RUNNING),
    ("NORMAL", False, InstanceStatus.STOPPED),
    ("PENDING_ADD", None, InstanceStatus.PENDING),
    ("PENDING_CHANGE", True, InstanceStatus.PENDING),
    ("PENDING_DELETE", None, InstanceStatus.DELETING),
    ("FAILED_ADD", None, InstanceStatus.FAILED),
    ("FAILED_CHANGE", None, InstanceStatus.FAILED),
    ("FAILED_DELETE", None, InstanceStatus.FAILED),
    ("REQUIRES_SUPPORT", None, InstanceStatus.UNKNOWN),
    (None, None, InstanceStatus.DELETED),
])
def test_provider_state_translation(state, started, expected):
    assert InstanceStatus.from_provider_state(state, started) == expected


@pytest.mark.parametrize("state", ["", "normal", "SOMETHING_NEW", 42, object()])
def test_unmapped_input_is_unknown(state):
    assert translate_status(state) == InstanceStatus.UNKNOWN


def test_normal_without_started_flag_is_stopped():
    assert translate_status("NORMAL") == InstanceStatus.STOPPED


def test_snapshot_status_uses_started_flag():
    assert ResourceSnapshot("NORMAL", True).status == InstanceStatus.RUNNING
    assert ResourceSnapshot("NORMAL", False).status == InstanceStatus.STOPPED
    assert ResourceSnapshot(None).status == InstanceStatus.DELETED


def test_terminal_statuses():
    assert InstanceStatus.FAILED.is_terminal
    assert InstanceStatus.DELETED.is_terminal
    assert not InstanceStatus.RUNNING.is_terminal
