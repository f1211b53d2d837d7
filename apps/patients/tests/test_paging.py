from unittest.mock import MagicMock

import pytest

from apps.patients.actions import biometrics_actions
from apps.patients.services import PageQuery, PageResult, load_page
from apps.patients.tables import (
    WITHOUT_BIOMETRICS,
    PatientTable,
    biometrics_table,
    page_query_from,
    patient_table,
)


def _row(rec):
    return rec["id"]


def test_load_page_maps_records_and_keeps_total(page_body):
    fetch = MagicMock(return_value=page_body(count=10, total=25))

    result = load_page(fetch, PageQuery(page_size=10, page_index=0, search_text="ada"), _row)

    fetch.assert_called_once_with(10, 0, "ada")
    assert result.rows == tuple(f"p{i}" for i in range(10))
    assert result.page == 0
    assert result.total_count == 25
    assert result.page_count == 3
    assert result.has_next and not result.has_previous
    assert (result.first_row, result.last_row) == (1, 10)


@pytest.mark.parametrize("body", [None, ""])
def test_empty_body_gives_empty_page(body):
    result = load_page(lambda *a: body, PageQuery(page_size=20, page_index=3), _row)
    assert result.rows == ()
    assert result.page == 0
    assert result.total_count == 0


def test_requested_page_is_echoed(page_body):
    body = page_body(count=5, total=25, start=20)
    body["page"] = 9
    result = load_page(lambda *a: body, PageQuery(page_size=10, page_index=2), _row)
    assert result.page == 2
    assert result.has_previous and not result.has_next
    assert (result.first_row, result.last_row) == (21, 25)


def test_list_body_derives_total(record):
    full = [record(patient_id=f"p{i}") for i in range(10)]
    result = load_page(lambda *a: full, PageQuery(page_size=10, page_index=1), _row)
    # a full page keeps the next one reachable
    assert result.total_count == 21
    assert result.has_next

    tail = full[:3]
    result = load_page(lambda *a: tail, PageQuery(page_size=10, page_index=2), _row)
    assert result.total_count == 23
    assert not result.has_next


def test_oversized_page_is_truncated(page_body):
    result = load_page(lambda *a: page_body(count=12, total=40), PageQuery(page_size=10), _row)
    assert len(result.rows) == 10


def test_fetch_errors_propagate():
    def boom(*args):
        raise RuntimeError("down")

    with pytest.raises(RuntimeError):
        load_page(boom, PageQuery(page_size=10), _row)


def test_empty_result_helpers():
    empty = PageResult.empty(page_size=10)
    assert empty.page_count == 0
    assert (empty.first_row, empty.last_row) == (0, 0)
    assert not empty.has_next


# ---- query parsing ----

def test_page_query_from_params():
    q = page_query_from({"page": "2", "size": "20", "q": "  ada "})
    assert q == PageQuery(page_size=20, page_index=2, search_text="ada")


@pytest.mark.parametrize("params", [{}, {"size": "7"}, {"size": "x", "page": "-1"}])
def test_page_query_falls_back_to_defaults(params):
    q = page_query_from(params)
    assert q.page_size == 10
    assert q.page_index == 0


# ---- table contract ----

def test_on_page_request_drives_the_fetch(page_body):
    fetch = MagicMock(return_value=page_body(count=2, total=2))
    table = PatientTable(fetch, biometrics_actions, frozenset())

    result = table.on_page_request(0, 20, "obi")

    fetch.assert_called_once_with(20, 0, "obi")
    assert [row.patient_id for row in result.rows] == ["p0", "p1"]
    # View is ungated on this screen
    assert [a.name for a in result.rows[0].actions] == ["View"]


def test_patient_table_uses_the_listing_endpoint():
    client = MagicMock()
    client.list_patients.return_value = None
    patient_table(client, {"view_patient"}).on_page_request(0, 10, "x")
    client.list_patients.assert_called_once_with(10, 0, "x")


def test_without_biometrics_table_ignores_search():
    client = MagicMock()
    client.list_patients_without_biometrics.return_value = []
    table = biometrics_table(client, set(), WITHOUT_BIOMETRICS)

    table.on_page_request(1, 10, "ignored")

    assert table.searchable is False
    client.list_patients_without_biometrics.assert_called_once_with(10, 1, "")
    client.list_patients_with_biometrics.assert_not_called()
