from datetime import date, datetime, time, timedelta

from portal.models import Contact, Product, Reservation


def add_reservation(db, account, day, status="completed", party_size=2, **fields):
    db.add(
        Reservation(
            user_id=account.id,
            customer_name="Gast",
            reservation_date=day,
            reservation_time="12:00",
            end_time="13:30",
            party_size=party_size,
            status=status,
            **fields,
        )
    )
    db.commit()


def test_revenue_endpoint(client, db, account):
    today = date.today()
    product = Product(user_id=account.id, name="Menü", price=15.0)
    db.add(product)
    db.commit()

    add_reservation(db, account, today, product_id=product.id, customer_phone="+49 1")
    add_reservation(db, account, today, price_paid=10.0, party_size=1, customer_phone="+49 2")
    add_reservation(db, account, today, status="pending", price_paid=100.0)
    add_reservation(db, account, today, status="cancelled", price_paid=100.0)

    response = client.get("/analytics/revenue", params={"range": "today"})

    assert response.status_code == 200
    body = response.json()
    assert body["range"] == "today"
    assert body["total_revenue"] == 40
    assert body["today_revenue"] == 40
    assert body["period_revenue"] == 40
    assert body["total_reservation_count"] == 3
    assert body["today_customers"] == 2
    assert body["total_customers"] == 2
    assert body["new_customers_today"] == 0


def test_contacts_drive_customer_counts(client, db, account):
    midday_today = datetime.combine(date.today(), time(12))
    db.add_all(
        [
            Contact(user_id=account.id, name="Alt", created_at=midday_today - timedelta(days=10)),
            Contact(user_id=account.id, name="Neu", created_at=midday_today),
            Contact(user_id=account.id, name="Auch neu", created_at=midday_today),
        ]
    )
    db.commit()
    add_reservation(db, account, date.today(), price_paid=10.0, customer_phone="+49 1")

    body = client.get("/analytics/revenue").json()

    assert body["range"] == "month"
    assert body["total_customers"] == 3
    assert body["new_customers_today"] == 2


def test_invalid_range(client):
    assert client.get("/analytics/revenue", params={"range": "year"}).status_code == 422
