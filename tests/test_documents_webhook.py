from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from portal.models import Document
from portal.utils import document_storage

URL = "/n8n/documents"


@pytest.fixture
def document(db, account):
    document = Document(
        user_id=account.id,
        name="Speisekarte.pdf",
        file_path=f"{account.id}/speisekarte.pdf",
        file_type="application/pdf",
        folder="/menus",
        tags=["menu"],
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    return document


def test_requires_signature(client):
    assert client.post(URL, json={"action": "list"}).status_code == 401


def test_create_with_defaults(client, account, n8n_headers):
    response = client.post(
        URL,
        json={
            "action": "create",
            "user_id": account.id,
            "data": {"name": "AGB.pdf", "file_path": "1/agb.pdf", "file_size": 1024},
        },
        headers=n8n_headers,
    )

    assert response.status_code == 200
    document = response.json()["document"]
    assert document["folder"] == "/"
    assert document["tags"] == []
    assert document["file_size"] == 1024


def test_create_missing_fields(client, account, n8n_headers):
    response = client.post(
        URL,
        json={"action": "create", "user_id": account.id, "data": {"name": "AGB.pdf"}},
        headers=n8n_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: user_id, name, file_path"


def test_update(client, document, n8n_headers):
    response = client.post(
        URL,
        json={"action": "update", "document_id": document.id, "data": {"folder": "/archiv"}},
        headers=n8n_headers,
    )

    updated = response.json()["document"]
    assert updated["folder"] == "/archiv"
    assert updated["name"] == "Speisekarte.pdf"
    assert updated["tags"] == ["menu"]


def test_list_search_is_case_insensitive(client, account, document, n8n_headers):
    response = client.post(
        URL,
        json={"action": "list", "user_id": account.id, "filters": {"search": "speise"}},
        headers=n8n_headers,
    )

    body = response.json()
    assert body["count"] == 1
    assert body["documents"][0]["id"] == document.id


def test_download_url(client, document, n8n_headers, monkeypatch):
    generate = MagicMock(return_value="https://r2.example/signed")
    monkeypatch.setattr(document_storage, "generate_download_url", generate)

    response = client.post(
        URL, json={"action": "get-download-url", "document_id": document.id}, headers=n8n_headers
    )

    assert response.json() == {
        "success": True,
        "document_id": document.id,
        "name": "Speisekarte.pdf",
        "download_url": "https://r2.example/signed",
        "expires_in": 3600,
    }
    generate.assert_called_once_with(document.file_path)


def test_download_url_unknown_document(client, n8n_headers):
    response = client.post(
        URL, json={"action": "get-download-url", "document_id": 12345}, headers=n8n_headers
    )
    assert response.status_code == 404


def test_delete_survives_storage_failure(client, db, document, n8n_headers, monkeypatch):
    r2 = MagicMock()
    r2.delete_object.side_effect = ClientError(
        {"Error": {"Code": "InternalError", "Message": "boom"}}, "DeleteObject"
    )
    monkeypatch.setattr(document_storage, "get_r2_client", lambda: r2)
    document_id = document.id

    response = client.post(
        URL, json={"action": "delete", "document_id": document_id}, headers=n8n_headers
    )

    assert response.json() == {"success": True, "deleted": document_id}
    r2.delete_object.assert_called_once()
    db.expire_all()
    assert db.get(Document, document_id) is None
