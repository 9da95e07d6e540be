"""FetchState tests — transitions of the published state struct.

Tests cover:
    - Initial defaults
    - begin/succeed/fail keep the data/error exclusivity rules
    - settle_cancelled restores the last terminal status
    - snapshot independence
"""

from fetchview.core.domain_types import FetchStatus
from fetchview.core.fetch_state import FetchState


def test_initial_state_is_idle():
    state = FetchState()
    assert state.data is None
    assert not state.loading
    assert state.error is None
    assert state.status == FetchStatus.IDLE


def test_begin_keeps_previous_data():
    state = FetchState(data=["a"])
    state.begin()
    assert state.loading
    assert state.data == ["a"]
    assert state.status == FetchStatus.LOADING


def test_succeed_clears_error():
    state = FetchState()
    state.fail(RuntimeError("boom"))
    state.begin()
    state.succeed({"id": 1})
    assert state.error is None
    assert state.data == {"id": 1}
    assert not state.loading
    assert state.status == FetchStatus.SUCCESS


def test_fail_keeps_data_and_overwrites_error():
    state = FetchState()
    state.succeed(["a"])
    state.fail(RuntimeError("first"))
    second = RuntimeError("second")
    state.fail(second)
    assert state.data == ["a"]
    assert state.error is second
    assert state.status == FetchStatus.FAILED


def test_settle_cancelled_restores_success():
    state = FetchState()
    state.succeed(["a"])
    state.begin()
    state.settle_cancelled()
    assert not state.loading
    assert state.status == FetchStatus.SUCCESS
    assert state.data == ["a"]


def test_settle_cancelled_before_any_result_is_idle():
    state = FetchState()
    state.begin()
    state.settle_cancelled()
    assert state.status == FetchStatus.IDLE
    assert state.error is None


def test_settle_cancelled_keeps_failed_status():
    state = FetchState()
    state.fail(RuntimeError("boom"))
    state.begin()
    state.settle_cancelled()
    assert state.status == FetchStatus.FAILED


def test_snapshot_is_independent_copy():
    state = FetchState(data=[1])
    snap = state.snapshot()
    state.begin()
    assert not snap.loading
    assert snap.data == [1]
