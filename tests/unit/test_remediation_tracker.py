"""Unit tests for the remediation state machine."""

import asyncio

import pytest

from grantscope.application.services.remediation_tracker import (
    RemediationState,
    RemediationTracker,
)
from grantscope.domain.exceptions import (
    NetworkError,
    RemediationRestriction,
    ValidationError,
)
from grantscope.domain.value_objects import RemediationAction

from tests.conftest import FakeRemediationGateway

REVOKE = RemediationAction.REVOKE_PERMISSION_SETS
RESET = RemediationAction.RESET_SYSTEM_PERMISSIONS


@pytest.fixture
def tracker(remediation_gateway: FakeRemediationGateway) -> RemediationTracker:
    return RemediationTracker(remediation_gateway)


@pytest.mark.asyncio
async def test_apply_moves_to_applied(tracker, remediation_gateway) -> None:
    assert tracker.state is RemediationState.IDLE

    record = await tracker.apply("U1", REVOKE)

    assert tracker.state is RemediationState.APPLIED
    assert tracker.undoable_action == REVOKE
    assert record.target_user_id == "U1"
    assert record.undoable
    assert remediation_gateway.calls == [("apply", "U1", REVOKE)]


@pytest.mark.asyncio
async def test_apply_accepts_action_value(tracker) -> None:
    record = await tracker.apply("U1", "reset-system-permissions")
    assert record.action_type is RESET


@pytest.mark.parametrize(
    "user_id, action",
    [(None, REVOKE), ("", REVOKE), ("U1", None), ("U1", "drop-tables")],
)
@pytest.mark.asyncio
async def test_apply_validates_before_any_call(
    tracker, remediation_gateway, user_id, action
) -> None:
    with pytest.raises(ValidationError):
        await tracker.apply(user_id, action)
    assert remediation_gateway.calls == []
    assert tracker.state is RemediationState.IDLE


@pytest.mark.asyncio
async def test_new_apply_supersedes_undo(tracker) -> None:
    await tracker.apply("U1", REVOKE)
    await tracker.apply("U1", RESET)

    assert tracker.can_undo(RESET)
    assert not tracker.can_undo(REVOKE)
    with pytest.raises(ValidationError):
        await tracker.undo(REVOKE)


@pytest.mark.asyncio
async def test_undo_returns_to_idle(tracker, remediation_gateway) -> None:
    await tracker.apply("U1", REVOKE)

    record = await tracker.undo(REVOKE)

    assert tracker.state is RemediationState.IDLE
    assert not record.undoable
    assert remediation_gateway.calls[-1] == ("undo", "U1", REVOKE)
    with pytest.raises(ValidationError):
        await tracker.undo()


@pytest.mark.asyncio
async def test_undo_without_action_uses_last_applied(tracker, remediation_gateway) -> None:
    await tracker.apply("U7", RESET)
    await tracker.undo()
    assert remediation_gateway.calls[-1] == ("undo", "U7", RESET)


@pytest.mark.asyncio
async def test_undo_when_idle_makes_no_call(tracker, remediation_gateway) -> None:
    with pytest.raises(ValidationError):
        await tracker.undo(REVOKE)
    assert remediation_gateway.calls == []


@pytest.mark.parametrize("error", [NetworkError("down"), RemediationRestriction()])
@pytest.mark.asyncio
async def test_failed_apply_keeps_previous_state(tracker, remediation_gateway, error) -> None:
    await tracker.apply("U1", REVOKE)
    remediation_gateway.error = error

    with pytest.raises(type(error)):
        await tracker.apply("U1", RESET)

    assert tracker.undoable_action == REVOKE


@pytest.mark.asyncio
async def test_failed_undo_keeps_applied(tracker, remediation_gateway) -> None:
    await tracker.apply("U1", REVOKE)
    remediation_gateway.error = NetworkError("down")

    with pytest.raises(NetworkError):
        await tracker.undo()

    assert tracker.state is RemediationState.APPLIED
    assert tracker.record.undoable


@pytest.mark.asyncio
async def test_undo_waits_for_in_flight_apply(tracker, remediation_gateway) -> None:
    hold = asyncio.Event()
    remediation_gateway.hold = hold

    applying = asyncio.create_task(tracker.apply("U1", REVOKE))
    undoing = asyncio.create_task(tracker.undo())
    for _ in range(5):
        await asyncio.sleep(0)
    assert remediation_gateway.calls == [("apply", "U1", REVOKE)]

    hold.set()
    await applying
    record = await undoing

    assert record.action_type == REVOKE
    assert tracker.state is RemediationState.IDLE
    assert [c[0] for c in remediation_gateway.calls] == ["apply", "undo"]
