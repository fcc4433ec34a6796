from unittest.mock import Mock

import pytest

from order_export.errors import ShopifyQueryError
from order_export.queries import OrderFilters
from order_export.shopify_client import ShopifyClient, order_gid


def _response(payload):
    resp = Mock()
    resp.json.return_value = payload
    return resp


def _page(nodes, has_next=False, cursor=None):
    return _response({
        "data": {
            "orders": {
                "edges": [{"cursor": "c", "node": n} for n in nodes],
                "pageInfo": {"hasNextPage": has_next, "hasPreviousPage": False,
                             "startCursor": None, "endCursor": cursor},
            }
        }
    })


@pytest.fixture
def session():
    s = Mock()
    s.headers = {}
    return s


@pytest.fixture
def client(session):
    return ShopifyClient(store_url="https://demo.myshopify.com/", access_token="shpat_test",
                         api_version="2024-10", session=session)


def test_requires_credentials(monkeypatch):
    monkeypatch.delenv("SHOPIFY_STORE_URL", raising=False)
    monkeypatch.delenv("SHOPIFY_ACCESS_TOKEN", raising=False)
    with pytest.raises(ValueError):
        ShopifyClient()


def test_endpoint_and_headers(client, session):
    assert client.endpoint == "https://demo.myshopify.com/admin/api/2024-10/graphql.json"
    assert session.headers["X-Shopify-Access-Token"] == "shpat_test"


def test_fetch_page_with_count(client, session, raw_order_node):
    session.post.side_effect = [
        _page([raw_order_node], has_next=True, cursor="abc"),
        _response({"data": {"ordersCount": {"count": 12, "precision": "EXACT"}}}),
    ]
    page = client.fetch_page(OrderFilters(financial_status="paid"), sort_key="name")

    assert [o.name for o in page.orders] == ["#1001"]
    assert page.page_info.has_next_page
    assert page.page_info.end_cursor == "abc"
    assert page.total_count == 12

    variables = session.post.call_args_list[0].kwargs["json"]["variables"]
    assert variables["query"] == "financial_status:paid"
    assert variables["sortKey"] == "ORDER_NUMBER"
    assert variables["reverse"] is True


def test_fetch_orders_follows_cursors(client, session, raw_order_node):
    second = dict(raw_order_node, id="gid://shopify/Order/5002", name="#1002")
    session.post.side_effect = [
        _page([raw_order_node], has_next=True, cursor="abc"),
        _page([second]),
    ]
    orders = client.fetch_orders()
    assert [o.name for o in orders] == ["#1001", "#1002"]
    assert session.post.call_args_list[1].kwargs["json"]["variables"]["after"] == "abc"


def test_fetch_orders_respects_limit(client, session, raw_order_node):
    session.post.side_effect = [_page([raw_order_node], has_next=True, cursor="abc")]
    orders = client.fetch_orders(limit=1)
    assert len(orders) == 1
    assert session.post.call_count == 1
    assert session.post.call_args.kwargs["json"]["variables"]["first"] == 1


def test_graphql_errors_raise(client, session):
    session.post.return_value = _response({"errors": [{"message": "Throttled"}]})
    with pytest.raises(ShopifyQueryError, match="Throttled"):
        client.count_orders()


def test_fetch_orders_by_ids_skips_missing(client, session, raw_order_node):
    session.post.side_effect = [
        _response({"data": {"order": raw_order_node}}),
        _response({"data": {"order": None}}),
    ]
    orders = client.fetch_orders_by_ids(["5001", "404"])
    assert [o.name for o in orders] == ["#1001"]
    first_vars = session.post.call_args_list[0].kwargs["json"]["variables"]
    assert first_vars == {"id": "gid://shopify/Order/5001"}


def test_order_gid():
    assert order_gid(42) == "gid://shopify/Order/42"
    assert order_gid("gid://shopify/Order/42") == "gid://shopify/Order/42"
