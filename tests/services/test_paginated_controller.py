"""Integration Tests: offset-paginated controller.

Invariants:
    - Transport params derived from page state and user filters
    - total_pages recomputed from each successful response
    - next/prev/set_page respect the boundary rules; set_size keeps the page
"""

import pytest

from fetchview.core.errors import ConfigurationError
from fetchview.services.paginated_controller import PaginatedCollectionController

from tests.fakes import flush


async def _loaded(transport, total=45, **kwargs):
    """Controller whose first page (of `total` items) has been delivered."""
    ctrl = PaginatedCollectionController("/items", transport=transport, **kwargs)
    task = ctrl.activate()
    await transport.wait_for_calls(1)
    transport.resolve(0, {"data": ["a", "b"], "total": total})
    await task
    return ctrl


# ─── params ──────────────────────────────────────────────────────

async def test_first_request_uses_default_size_and_offset(transport):
    ctrl = PaginatedCollectionController("/items", {"q": "ada"}, transport=transport)
    ctrl.activate()
    await transport.wait_for_calls(1)
    assert transport.calls[0].params == {"size": 20, "offset": 0, "q": "ada"}
    ctrl.close()


async def test_page_size_from_settings(transport, monkeypatch):
    monkeypatch.setenv("FETCHVIEW_DEFAULT_PAGE_SIZE", "50")
    ctrl = PaginatedCollectionController("/items", transport=transport)
    assert ctrl.page_size == 50


async def test_custom_params_builder_and_projections(transport):
    ctrl = PaginatedCollectionController(
        "/items",
        {"q": "x"},
        current_page=2,
        page_size=10,
        get_pagination_params=lambda window, user: {
            "limit": window.size, "skip": window.offset, **(user or {}),
        },
        get_data=lambda r: r["items"],
        get_total=lambda r: r["count"],
        transport=transport,
    )
    task = ctrl.activate()
    await transport.wait_for_calls(1)
    assert transport.calls[0].params == {"limit": 10, "skip": 10, "q": "x"}
    transport.resolve(0, {"items": [1, 2], "count": 30})
    await task
    assert ctrl.data == [1, 2]
    assert ctrl.total == 30
    assert ctrl.total_pages == 3


async def test_total_pages_computed_on_success(transport):
    ctrl = await _loaded(transport, total=45)
    assert ctrl.data == ["a", "b"]
    assert ctrl.total == 45
    assert ctrl.total_pages == 2


async def test_data_starts_empty(transport):
    ctrl = PaginatedCollectionController("/items", transport=transport)
    assert ctrl.data == []
    assert ctrl.total_pages is None


# ─── navigation ──────────────────────────────────────────────────

async def test_next_requests_following_offset(transport):
    ctrl = await _loaded(transport, total=60)
    task = ctrl.next()
    assert ctrl.page_number == 2
    await transport.wait_for_calls(2)
    assert transport.calls[1].params == {"size": 20, "offset": 20}
    transport.resolve(1, {"data": ["c"], "total": 60})
    await task
    assert ctrl.data == ["c"]


async def test_next_is_noop_at_total_pages(transport):
    ctrl = await _loaded(transport, total=45, current_page=2)
    assert ctrl.next() is None
    assert ctrl.page_number == 2
    await flush()
    assert len(transport.calls) == 1


async def test_prev_is_noop_on_first_page(transport):
    ctrl = await _loaded(transport)
    assert ctrl.prev() is None
    assert ctrl.page_number == 1


async def test_prev_moves_back(transport):
    ctrl = await _loaded(transport, total=100, current_page=3)
    task = ctrl.prev()
    await transport.wait_for_calls(2)
    assert ctrl.page_number == 2
    assert transport.calls[1].params["offset"] == 20
    transport.resolve(1, {"data": [], "total": 100})
    await task


async def test_set_page_total_pages_is_noop(transport):
    ctrl = await _loaded(transport, total=60)
    assert ctrl.total_pages == 3
    assert ctrl.set_page(3) is None
    assert ctrl.page_number == 1


async def test_set_page_out_of_range_is_noop(transport):
    ctrl = await _loaded(transport, total=60)
    assert ctrl.set_page(0) is None
    assert ctrl.set_page(-1) is None
    assert ctrl.page_number == 1


async def test_set_page_one_succeeds(transport):
    ctrl = await _loaded(transport, total=60, current_page=2)
    task = ctrl.set_page(1)
    assert task is not None
    assert ctrl.page_number == 1
    await transport.wait_for_calls(2)
    assert transport.calls[1].params["offset"] == 0
    transport.resolve(1, {"data": ["a"], "total": 60})
    await task


async def test_set_size_refetches_current_page(transport):
    ctrl = await _loaded(transport, total=60, current_page=2)
    task = ctrl.set_size(10)
    await transport.wait_for_calls(2)
    assert ctrl.page_number == 2
    assert transport.calls[1].params == {"size": 10, "offset": 10}
    transport.resolve(1, {"data": ["x"], "total": 60})
    await task
    assert ctrl.total_pages == 6


async def test_set_size_rejects_non_positive(transport):
    ctrl = await _loaded(transport)
    with pytest.raises(ConfigurationError):
        ctrl.set_size(0)


async def test_reload_replaces_filters_and_page(transport):
    ctrl = await _loaded(transport, total=100)
    task = ctrl.reload({"q": "new"}, 3)
    await transport.wait_for_calls(2)
    assert transport.calls[1].params == {"size": 20, "offset": 40, "q": "new"}
    transport.resolve(1, {"data": [], "total": 100})
    await task
    assert ctrl.page_number == 3


async def test_reload_without_arguments_refetches_same_page(transport):
    ctrl = await _loaded(transport)
    task = ctrl.reload()
    await transport.wait_for_calls(2)
    assert transport.calls[1].params == transport.calls[0].params
    transport.resolve(1, {"data": ["fresh"], "total": 45})
    await task
    assert ctrl.data == ["fresh"]


async def test_user_params_change_refetches(transport):
    ctrl = await _loaded(transport)
    task = ctrl.set_user_params({"q": "b"})
    await transport.wait_for_calls(2)
    assert transport.calls[1].params == {"size": 20, "offset": 0, "q": "b"}
    transport.resolve(1, {"data": [], "total": 0})
    await task
    assert ctrl.total_pages == 0


async def test_navigation_while_loading_is_ignored(transport):
    ctrl = await _loaded(transport, total=100)
    task = ctrl.next()
    await transport.wait_for_calls(2)
    assert ctrl.next() is None
    assert ctrl.page_number == 3
    await flush()
    assert len(transport.calls) == 2
    transport.resolve(1, {"data": [], "total": 100})
    await task


def test_invalid_initial_page_raises(transport):
    with pytest.raises(ConfigurationError):
        PaginatedCollectionController("/items", current_page=0, transport=transport)


async def test_rejected_reload_keeps_filters(transport):
    ctrl = await _loaded(transport, user_params={"q": "a"})

    with pytest.raises(ConfigurationError):
        ctrl.reload({"q": "b"}, page_number=-1)

    assert ctrl.user_params == {"q": "a"}
    assert ctrl.page_number == 1
    await flush()
    assert len(transport.calls) == 1


async def test_reload_without_filters_keeps_current_filters(transport):
    ctrl = await _loaded(transport, user_params={"q": "a"})
    task = ctrl.reload(None, 2)
    await transport.wait_for_calls(2)
    assert transport.calls[1].params == {"size": 20, "offset": 20, "q": "a"}
    transport.resolve(1, {"data": [], "total": 45})
    await task


async def test_filters_cleared_explicitly_before_reload(transport):
    ctrl = await _loaded(transport, user_params={"q": "a"})
    ctrl.set_user_params(None)
    await transport.wait_for_calls(2)
    assert transport.calls[1].params == {"size": 20, "offset": 0}
    transport.resolve(1, {"data": [], "total": 45})
    await ctrl.wait()
