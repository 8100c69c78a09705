from datetime import datetime

import pytest
from sqlalchemy.exc import SQLAlchemyError

from portal.domain.contacts.repository import ContactRepository
from portal.domain.contacts.service import parse_booking_count, parse_contacts_csv
from portal.models import Contact

EXPORT = (
    "Name,Vorname,Nachname,Telefon,Email,Info,Einwilligungsstatus,Geschlecht,Sprache,"
    "Anzahl der Buchungen,Erstellt\n"
    '"Max Mustermann",Max,Mustermann,"+49 123 456789","max@example.com","Stammkunde, VIP",J,M,DE,5,'
    '"2024-01-01 10:00:00"\n'
    ",Ohne,Namen,+49 000,,,,,,,\n"
    "Erika Musterfrau,Erika,Musterfrau,,erika@example.com,,N,W,DE,keine,kaputt\n"
)


def upload(client, content: str, filename="kunden.csv"):
    return client.post(
        "/contacts/import", files={"file": (filename, content.encode("utf-8"), "text/csv")}
    )


class TestParseCsv:
    def test_maps_german_columns(self):
        contacts = parse_contacts_csv(EXPORT)

        assert len(contacts) == 2
        max_ = contacts[0]
        assert max_["name"] == "Max Mustermann"
        assert max_["first_name"] == "Max"
        assert max_["phone"] == "+49 123 456789"
        assert max_["info"] == "Stammkunde, VIP"
        assert max_["consent_status"] == "J"
        assert max_["gender"] == "M"
        assert max_["booking_count"] == 5
        assert max_["original_created_at"] == datetime(2024, 1, 1, 10, 0)

    def test_invalid_numbers_and_dates_fall_back(self):
        erika = parse_contacts_csv(EXPORT)[1]
        assert erika["phone"] is None
        assert erika["booking_count"] == 0
        assert erika["original_created_at"] is None

    def test_semicolon_separated(self):
        contacts = parse_contacts_csv("NAME;TELEFON\nJana;0171 1234\n")
        assert contacts == [
            {
                "name": "Jana",
                "first_name": None,
                "last_name": None,
                "phone": "0171 1234",
                "email": None,
                "info": None,
                "consent_status": None,
                "gender": None,
                "booking_count": 0,
                "original_created_at": None,
            }
        ]

    def test_header_only_or_empty(self):
        assert parse_contacts_csv("Name,Telefon\n") == []
        assert parse_contacts_csv("") == []

    def test_without_name_column(self):
        assert parse_contacts_csv("Telefon,Email\n0171,a@b.de\n") == []

    @pytest.mark.parametrize(
        "value,expected",
        [("5", 5), (" 12 ", 12), ("5 Buchungen", 5), ("5.0", 5), ("keine", 0), ("", 0), (None, 0)],
    )
    def test_booking_count_reads_leading_integer(self, value, expected):
        assert parse_booking_count(value) == expected


class TestImportEndpoint:
    def test_import_and_list(self, client, db, account):
        response = upload(client, EXPORT)

        assert response.status_code == 200
        assert response.json() == {"success": 2, "failed": 0, "errors": []}
        assert db.query(Contact).filter_by(user_id=account.id).count() == 2

        listing = client.get("/contacts").json()
        assert listing["total"] == 2
        assert [c["name"] for c in listing["contacts"]] == ["Erika Musterfrau", "Max Mustermann"]

    def test_search(self, client):
        upload(client, EXPORT)

        by_email = client.get("/contacts", params={"search": "ERIKA@"}).json()
        by_phone = client.get("/contacts", params={"search": "456789"}).json()

        assert [c["name"] for c in by_email["contacts"]] == ["Erika Musterfrau"]
        assert [c["name"] for c in by_phone["contacts"]] == ["Max Mustermann"]

    def test_no_valid_rows(self, client):
        response = upload(client, "Name,Telefon\n,0171\n")
        assert response.status_code == 400

    def test_inserts_in_batches(self, client, db):
        rows = "\n".join(f"Kunde {i},0171{i:04d}" for i in range(250))

        response = upload(client, f"Name,Telefon\n{rows}\n")

        assert response.json()["success"] == 250
        assert db.query(Contact).count() == 250

    def test_failed_batch_is_reported(self, client, db, monkeypatch):
        calls = {"count": 0}
        original = ContactRepository.insert_batch

        def flaky_insert(session, user_id, rows):
            calls["count"] += 1
            if calls["count"] == 2:
                raise SQLAlchemyError("disk full")
            original(session, user_id, rows)

        monkeypatch.setattr(ContactRepository, "insert_batch", staticmethod(flaky_insert))
        rows = "\n".join(f"Kunde {i}" for i in range(150))

        result = upload(client, f"Name\n{rows}\n").json()

        assert result["success"] == 100
        assert result["failed"] == 50
        assert result["errors"] == ["Batch 2: disk full"]
        assert db.query(Contact).count() == 100

    def test_latin1_file(self, client):
        response = client.post(
            "/contacts/import",
            files={"file": ("kunden.csv", "Name\nJürgen Größe\n".encode("latin-1"), "text/csv")},
        )
        assert response.json()["success"] == 1
        assert client.get("/contacts").json()["contacts"][0]["name"] == "Jürgen Größe"


def test_delete_all(client, db):
    upload(client, EXPORT)

    response = client.delete("/contacts")

    assert response.json()["deleted"] == 2
    assert db.query(Contact).count() == 0


def test_template_download(client):
    response = client.get("/contacts/template")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "kunden_vorlage.csv" in response.headers["content-disposition"]
    assert response.text.startswith("Name,Vorname,Nachname,Telefon,Email")
    assert parse_contacts_csv(response.text)[0]["booking_count"] == 5
