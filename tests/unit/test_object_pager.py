"""Unit tests for the object grant offset pager."""

import pytest

from grantscope.application.services.object_pager import ObjectGrantPager
from grantscope.application.services.search_gate import SearchGate
from grantscope.application.services.selection import Selection
from grantscope.domain.exceptions import NetworkError
from grantscope.domain.value_objects import SourceType

from tests.conftest import FakeGrantSource, make_grant


def _pager(source: FakeGrantSource, user_id: str | None = "U1", **kwargs) -> ObjectGrantPager:
    selection = Selection()
    if user_id:
        selection.select(user_id)
    return ObjectGrantPager(source, selection, SearchGate(3), page_size=2, **kwargs)


def _objects(*names: str):
    return [make_grant(name, read=True) for name in names]


@pytest.mark.asyncio
async def test_fetch_page_merges_within_page(grant_source: FakeGrantSource) -> None:
    grant_source.object_grants["U1"] = [
        make_grant("Account", source_name="ProfileA", read=True),
        make_grant(
            "Account",
            source_name="PermSetB",
            source_type=SourceType.PERMISSION_SET,
            create=True,
        ),
    ]
    pager = _pager(grant_source)

    assert await pager.fetch_page() is True

    assert len(pager.grants) == 1
    account = pager.grants[0]
    assert (account.can_read, account.can_create, account.can_edit, account.can_delete) == (
        True,
        True,
        False,
        False,
    )
    assert pager.window.server_total == 2
    assert grant_source.calls[-1] == ("get_object_grants", "U1", 1, 2, "")


@pytest.mark.asyncio
async def test_next_and_previous_stay_in_range(grant_source: FakeGrantSource) -> None:
    grant_source.object_grants["U1"] = _objects("A1", "A2", "B1", "B2", "C1")
    pager = _pager(grant_source)
    await pager.fetch_page()
    assert pager.window.page_count == 3

    assert await pager.previous() is False
    assert await pager.next() is True
    assert await pager.next() is True
    assert pager.window.page_index == 3
    assert [g.key for g in pager.grants] == ["C1"]
    assert pager.is_last_page

    calls = grant_source.count("get_object_grants")
    assert await pager.next() is False
    assert grant_source.count("get_object_grants") == calls

    assert await pager.previous() is True
    assert [g.key for g in pager.grants] == ["B1", "B2"]


@pytest.mark.asyncio
async def test_each_page_is_independent(grant_source: FakeGrantSource) -> None:
    grant_source.object_grants["U1"] = _objects("A1", "A2", "B1")
    pager = _pager(grant_source)
    await pager.fetch_page()
    await pager.next()
    assert [g.key for g in pager.grants] == ["B1"]


@pytest.mark.asyncio
async def test_search_resets_to_first_page(grant_source: FakeGrantSource) -> None:
    grant_source.object_grants["U1"] = _objects("Account", "Asset", "Case", "Contact", "Contract")
    pager = _pager(grant_source)
    await pager.fetch_page()
    await pager.next()
    assert pager.window.page_index == 2

    decision = await pager.set_search_term("  con ")

    assert decision.accepted
    assert pager.term == "con"
    assert pager.window.page_index == 1
    assert [g.key for g in pager.grants] == ["Contact", "Contract"]
    assert grant_source.calls[-1] == ("get_object_grants", "U1", 1, 2, "con")


@pytest.mark.asyncio
async def test_rejected_search_makes_no_call(grant_source: FakeGrantSource) -> None:
    grant_source.object_grants["U1"] = _objects("A1", "A2", "B1")
    pager = _pager(grant_source)
    await pager.fetch_page()
    await pager.next()
    calls = len(grant_source.calls)

    decision = await pager.set_search_term("ab")

    assert not decision.accepted
    assert len(grant_source.calls) == calls
    assert pager.window.page_index == 2
    assert pager.term == ""


@pytest.mark.asyncio
async def test_failure_clears_working_set(grant_source: FakeGrantSource) -> None:
    grant_source.object_grants["U1"] = _objects("A1", "A2")
    pager = _pager(grant_source)
    await pager.fetch_page()
    grant_source.failing.add("get_object_grants")

    with pytest.raises(NetworkError):
        await pager.fetch_page()

    assert pager.grants == ()
    assert pager.window.server_total == 0
    assert pager.page_info == "No records found"


@pytest.mark.asyncio
async def test_no_selection_makes_no_call(grant_source: FakeGrantSource) -> None:
    pager = _pager(grant_source, user_id=None)
    assert await pager.fetch_page() is False
    assert grant_source.calls == []


@pytest.mark.asyncio
async def test_page_info_and_truncation(grant_source: FakeGrantSource) -> None:
    grant_source.object_grants["U1"] = _objects("A1", "A2", "B1", "B2", "C1")
    pager = _pager(grant_source, result_cap=5)
    await pager.fetch_page()
    assert pager.page_info == "Showing 1-2 of 5 records"
    assert pager.is_truncated
    await pager.next()
    await pager.next()
    assert pager.page_info == "Showing 5-5 of 5 records"
