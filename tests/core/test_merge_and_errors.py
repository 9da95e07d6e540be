"""Merge rule, error hierarchy and domain type tests — pure, no event loop."""

from fetchview.core.domain_types import new_request_id
from fetchview.core.errors import (
    CancellationSignal,
    ConfigurationError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    FetchViewError,
    TransportError,
)
from fetchview.core.merge_data import merge_page_data


# --- merge_page_data ----------------------------------------------------------

def test_incremental_pages_accumulate():
    first = merge_page_data([], ["a", "b"], incremental=True, reset_pending=False)
    second = merge_page_data(first, ["c", "d"], incremental=True, reset_pending=False)
    assert second == ["a", "b", "c", "d"]


def test_pending_reset_replaces_incremental_page():
    merged = merge_page_data(["a", "b"], ["c", "d"], incremental=True, reset_pending=True)
    assert merged == ["c", "d"]


def test_non_incremental_page_replaces():
    merged = merge_page_data(["a", "b"], ["c"], incremental=False, reset_pending=False)
    assert merged == ["c"]


def test_merge_returns_new_list():
    existing = ["a"]
    merged = merge_page_data(existing, ["b"], incremental=True, reset_pending=False)
    assert merged is not existing
    assert existing == ["a"]


def test_merge_with_no_existing_data():
    assert merge_page_data(None, ["a"], incremental=True, reset_pending=False) == ["a"]


# --- errors -------------------------------------------------------------------

def test_transport_error_keeps_status_code():
    err = TransportError("HTTP 503", status_code=503)
    assert isinstance(err, FetchViewError)
    assert err.status_code == 503
    assert err.category == ErrorCategory.TRANSPORT


def test_cancellation_signal_is_info_severity():
    err = CancellationSignal()
    assert err.code == "CANCELLED"
    assert err.severity == ErrorSeverity.INFO


def test_configuration_error_is_critical():
    assert ConfigurationError("no transport").severity == ErrorSeverity.CRITICAL


def test_to_dict_carries_context():
    ctx = ErrorContext(request_id="abc", endpoint="/users")
    body = TransportError("down", context=ctx).to_dict()
    assert body["error"]["code"] == "TRANSPORT_ERROR"
    assert body["error"]["context"]["request_id"] == "abc"
    assert body["error"]["context"]["endpoint"] == "/users"


# --- request ids --------------------------------------------------------------

def test_request_ids_are_unique_hex():
    ids = {new_request_id() for _ in range(1000)}
    assert len(ids) == 1000
    assert all(len(i) == 32 for i in ids)
