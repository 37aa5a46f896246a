import json
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from formflow.core.errors import StoreUnavailable
from formflow.main import app
from formflow.settings import settings

client = TestClient(app)


@pytest.fixture
def api_store(wired_store, questionnaire):
    return wired_store


def test_actions_manifest():
    response = client.get("/actions.json")
    assert response.status_code == 200
    assert response.json() == {"rules": [{"pathPattern": "/api/actions/**", "apiPath": "/api/actions/**"}]}


def test_complete_route_is_not_a_form_id():
    response = client.get("/api/actions/complete")
    assert response.status_code == 200
    assert response.json() == {"message": "Thank you for your response!"}


def test_get_renders_entry(api_store):
    response = client.get("/api/actions/f1")
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Test Form"
    assert body["icon"] == settings.ACTION_ICON_URL
    assert body["links"]["actions"] == [{
        "label": "What is your name?",
        "href": "/api/actions/f1?node=q1",
        "parameters": [{"name": "input", "label": "What is your name?", "required": True}],
    }]
    assert "error" not in body
    assert api_store.writes == []


def test_post_invalid_then_valid_then_terminal(api_store):
    response = client.post("/api/actions/f1?account=alice", json={"input": "   "})
    assert response.status_code == 200
    assert response.json()["error"] == {"message": "This field is required"}
    assert "session:f1:alice" not in api_store.data

    response = client.post("/api/actions/f1?node=q1", json={"account": "alice", "input": "Alice"})
    assert response.status_code == 200
    hrefs = [a["href"] for a in response.json()["links"]["actions"]]
    assert hrefs == ["/api/actions/f1?choice=yes&next=end", "/api/actions/f1?choice=no&next=end"]
    assert json.loads(api_store.data["session:f1:alice"]) == {"currentNodeId": "q2"}

    response = client.post("/api/actions/f1?account=alice&choice=yes&next=end")
    assert response.status_code == 200
    assert response.json()["links"]["actions"] == [{"label": "Finish", "href": "/api/actions/complete"}]
    assert json.loads(api_store.data["session:f1:alice"]) == {"currentNodeId": "q2"}


def test_get_with_account_resumes_position(api_store):
    api_store.set("session:f1:bob", json.dumps({"currentNodeId": "q2"}))
    body = client.get("/api/actions/f1?account=bob").json()
    assert [a["label"] for a in body["links"]["actions"]] == ["Yes", "No"]


def test_post_without_value_rerenders(api_store):
    api_store.set("session:f1:bob", json.dumps({"currentNodeId": "q2"}))
    api_store.writes.clear()
    body = client.post("/api/actions/f1?account=bob").json()
    assert "error" not in body
    assert api_store.writes == []


def test_query_input_is_accepted(api_store):
    client.post("/api/actions/f1?account=carol&input=Carol")
    assert json.loads(api_store.data["session:f1:carol"]) == {"currentNodeId": "q2"}


@patch("formflow.api.routes.log")
def test_node_hint_mismatch_logged(mock_log, api_store):
    api_store.set("session:f1:dave", json.dumps({"currentNodeId": "q2"}))
    client.post("/api/actions/f1?account=dave&node=q1&input=x")
    mock_log.assert_called_once()
    assert mock_log.call_args.args[0] == "node_hint_mismatch"
    assert mock_log.call_args.kwargs["evaluatedNodeId"] == "q2"


def test_unknown_form_is_404_without_actions(wired_store):
    response = client.get("/api/actions/missing?account=alice")
    assert response.status_code == 404
    assert "links" not in response.json()
    assert "missing" in response.json()["message"]


def test_store_outage_is_503(api_store):
    def boom(key):
        raise StoreUnavailable("get", key, ConnectionError("down"))

    api_store.get = boom
    response = client.get("/api/actions/f1?account=alice")
    assert response.status_code == 503
    assert response.headers["Retry-After"] == "5"
    assert "links" not in response.json()


def test_health():
    assert client.get("/health").json() == {"status": "ok"}


@patch("formflow.main.RedisStore")
def test_health_store_unreachable(mock_store_cls):
    mock_store_cls.return_value.ping.side_effect = StoreUnavailable("ping", "")
    response = client.get("/health/store")
    assert response.status_code == 503


WALKTHROUGH = {
    "nodes": [
        {"id": "start", "type": "start", "data": {"description": "Welcome"}},
        {"id": "name", "type": "input", "data": {"questionText": "Name?", "required": True}},
        {"id": "mint", "type": "transaction", "data": {"transactionType": "MINT_NFT"}},
        {
            "id": "pick",
            "type": "choice",
            "data": {"questionText": "Pick", "required": True, "options": [{"label": "A", "value": "a"}]},
        },
    ],
    "edges": [
        {"id": "e1", "source": "start", "target": "name"},
        {"id": "e2", "source": "name", "target": "mint"},
        {"id": "e3", "source": "mint", "target": "pick"},
    ],
}


def _click(href, **body):
    response = client.post(href, json=body)
    assert response.status_code == 200
    return response.json()


def _position(store, account):
    return json.loads(store.data[f"session:f1:{account}"])["currentNodeId"]


def test_every_action_href_kind_moves_the_participant(wired_store, put_form):
    put_form(wired_store, "f1", WALKTHROUGH)

    body = client.get("/api/actions/f1").json()
    start_href = body["links"]["actions"][0]["href"]
    assert start_href == "/api/actions/f1?next_node=name"

    body = _click(start_href, account="erin")
    assert _position(wired_store, "erin") == "name"
    node_href = body["links"]["actions"][0]["href"]
    assert node_href == "/api/actions/f1?node=name"

    body = _click(node_href, account="erin", input="Erin")
    assert _position(wired_store, "erin") == "mint"
    continue_action = body["links"]["actions"][0]
    assert continue_action == {"label": "Continue", "href": "/api/actions/f1?next=pick"}

    body = _click(continue_action["href"], account="erin")
    assert _position(wired_store, "erin") == "pick"
    choice_href = body["links"]["actions"][0]["href"]
    assert choice_href == "/api/actions/f1?choice=a&next=end"

    body = _click(choice_href, account="erin")
    assert body["label"] == "Complete"
    assert _position(wired_store, "erin") == "pick"


def test_start_click_with_no_edges_completes(wired_store, put_form):
    put_form(wired_store, "f1", {"nodes": [{"id": "start", "type": "start"}], "edges": []})
    body = _click("/api/actions/f1?next_node=end", account="erin")
    assert body["links"]["actions"] == [{"label": "Finish", "href": "/api/actions/complete"}]
    assert wired_store.writes == []


def test_continue_click_against_required_input_reprompts(api_store):
    body = _click("/api/actions/f1?next=q2", account="erin")
    assert body["error"] == {"message": "This field is required"}
    assert "session:f1:erin" not in api_store.data


def test_stale_position_is_404(api_store):
    api_store.set("session:f1:frank", json.dumps({"currentNodeId": "deleted"}))
    api_store.writes.clear()
    response = client.post("/api/actions/f1?account=frank", json={"input": "Frank"})
    assert response.status_code == 404
    assert "deleted" in response.json()["message"]
    assert "links" not in response.json()
    assert api_store.writes == []


def test_null_title_renders(wired_store):
    wired_store.set("form:f1", json.dumps({"title": None, "schema": {"nodes": [{"id": "q1", "type": "input"}]}}))
    response = client.get("/api/actions/f1")
    assert response.status_code == 200
    assert response.json()["title"] == ""
