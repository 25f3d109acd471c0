"""
Tests for the record store client. The HTTP session is mocked; no network.
"""
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import requests

from exceptions import FetchError, StoreError
from schemas import ItemPayload
from store_service import MAX_ERROR_TEXT, RecordStoreClient


def make_response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = json_data
    response.text = text
    return response


@pytest.fixture
def http():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(http):
    return RecordStoreClient("https://project.example.co/", "secret", "MyinventoryDB", timeout=5, session=http)


ROWS = [
    {"id": 2, "name": "Pencil", "price": 0.5, "qty": 20, "created_at": "2024-01-02T00:00:00+00:00"},
    {"id": 1, "name": "Pen", "price": 1.5, "qty": 10, "created_at": "2024-01-01T00:00:00+00:00"},
]


def test_requires_url_and_table(http):
    with pytest.raises(ValueError):
        RecordStoreClient("", "secret", "MyinventoryDB", session=http)


def test_fetch_all_requests_newest_first(client, http):
    http.request.return_value = make_response(json_data=ROWS)

    items = client.fetch_all()

    method, url = http.request.call_args.args
    kwargs = http.request.call_args.kwargs
    assert method == "GET"
    assert url == "https://project.example.co/rest/v1/MyinventoryDB"
    assert kwargs["params"] == {"select": "*", "order": "created_at.desc"}
    assert kwargs["headers"]["apikey"] == "secret"
    assert kwargs["headers"]["Authorization"] == "Bearer secret"
    assert kwargs["timeout"] == 5
    assert [i.name for i in items] == ["Pencil", "Pen"]
    assert items[1].price == Decimal("1.5")


def test_fetch_all_skips_malformed_rows(client, http):
    http.request.return_value = make_response(json_data=ROWS + [{"id": 3, "price": "x"}])
    assert len(client.fetch_all()) == 2


def test_fetch_all_raises_on_http_error(client, http):
    http.request.return_value = make_response(status_code=503, text="unavailable")
    with pytest.raises(FetchError) as exc_info:
        client.fetch_all()
    assert exc_info.value.status_code == 503


def test_fetch_all_raises_on_connection_error(client, http):
    http.request.side_effect = requests.exceptions.ConnectionError("refused")
    with pytest.raises(FetchError):
        client.fetch_all()


def test_list_all_treats_failure_as_empty(client, http):
    http.request.side_effect = requests.exceptions.Timeout("slow")
    assert client.list_all() == []


def test_create_posts_row_without_returning_it(client, http):
    http.request.return_value = make_response(status_code=201)

    result = client.create(ItemPayload(name="Pencil", price=Decimal("0.5"), qty=20))

    assert result is None
    assert http.request.call_args.args[0] == "POST"
    kwargs = http.request.call_args.kwargs
    assert kwargs["json"] == [{"name": "Pencil", "price": 0.5, "qty": 20}]
    assert kwargs["headers"]["Prefer"] == "return=minimal"


def test_update_filters_by_id(client, http):
    http.request.return_value = make_response(status_code=204)

    client.update(7, ItemPayload(name="Pen", price=Decimal("2"), qty=3))

    assert http.request.call_args.args[0] == "PATCH"
    kwargs = http.request.call_args.kwargs
    assert kwargs["params"] == {"id": "eq.7"}
    assert kwargs["json"] == {"name": "Pen", "price": 2.0, "qty": 3}


def test_delete_filters_by_id(client, http):
    http.request.return_value = make_response(status_code=204)
    client.delete(7)
    assert http.request.call_args.args[0] == "DELETE"
    assert http.request.call_args.kwargs["params"] == {"id": "eq.7"}


def test_mutation_failure_raises_store_error(client, http):
    http.request.return_value = make_response(status_code=400, text="bad row")
    with pytest.raises(StoreError) as exc_info:
        client.delete(7)
    assert exc_info.value.status_code == 400
    assert "bad row" in exc_info.value.message


def test_long_error_bodies_are_clipped(client, http):
    http.request.return_value = make_response(status_code=500, text="x" * 10000)
    with pytest.raises(StoreError) as exc_info:
        client.create(ItemPayload(name="Pen", price=Decimal("1"), qty=1))
    assert len(exc_info.value.message) <= MAX_ERROR_TEXT + 3
    assert exc_info.value.message.startswith("POST MyinventoryDB returned 500: xxx")
