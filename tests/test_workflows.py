import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest

from portal import config
from portal.routes import workflows
from portal.webhook_security import compute_hmac_sha256

BODY = {
    "workflow_id": "telefon-assistent",
    "workflow_name": "Telefon Assistent",
    "action": "setup_workflow",
}
WEBHOOK_URL = "https://n8n.example/webhook/setup"


@pytest.fixture
def send(monkeypatch):
    monkeypatch.setattr(config, "N8N_WORKFLOW_WEBHOOK_URL", WEBHOOK_URL)
    send = AsyncMock(return_value=httpx.Response(200, json={"status": "started"}))
    monkeypatch.setattr(workflows, "send_workflow_request", send)
    return send


def test_trigger_forwards_signed_payload(client, send):
    response = client.post("/workflows/trigger", json=BODY)

    assert response.status_code == 200
    assert response.json()["response"] == {"status": "started"}

    url, body, headers = send.await_args.args
    assert url == WEBHOOK_URL
    forwarded = json.loads(body)
    assert forwarded["input_data"] == {"customer_name": "Anna Beispiel"}
    assert forwarded["workflow_id"] == "telefon-assistent"
    assert headers["x-n8n-signature"] == f"sha256={compute_hmac_sha256('test-n8n-secret', body)}"


def test_explicit_customer_name_is_kept(client, send):
    client.post("/workflows/trigger", json={**BODY, "input_data": {"customer_name": "Chef"}})

    _, body, _ = send.await_args.args
    assert json.loads(body)["input_data"]["customer_name"] == "Chef"


def test_not_configured(client, monkeypatch):
    monkeypatch.setattr(config, "N8N_WORKFLOW_WEBHOOK_URL", None)
    assert client.post("/workflows/trigger", json=BODY).status_code == 503


def test_upstream_error(client, send):
    send.return_value = httpx.Response(500, text="boom")
    assert client.post("/workflows/trigger", json=BODY).status_code == 502


def test_upstream_unreachable(client, send):
    send.side_effect = httpx.ConnectError("refused")
    assert client.post("/workflows/trigger", json=BODY).status_code == 502


@pytest.mark.parametrize(
    "user,expected",
    [
        (SimpleNamespace(full_name="Anna", company_name="Bistro", email="a@x.de"), "Anna"),
        (SimpleNamespace(full_name=None, company_name="Bistro", email="a@x.de"), "Bistro"),
        (SimpleNamespace(full_name="", company_name=None, email="chef@x.de"), "chef"),
        (SimpleNamespace(full_name=None, company_name=None, email=None), "Kunde"),
    ],
)
def test_default_customer_name(user, expected):
    assert workflows.default_customer_name(user) == expected
