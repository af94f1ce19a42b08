# tests/helpers.py
import uuid
from itertools import count

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.payment import Payment

_box_ids = count(100)


def create_owner(client, *, name: str | None = None, box_id: int | None = None,
                 phone: str = "+821012345678", place: str | None = None) -> dict:
    body = {
        "name": name or f"owner-{uuid.uuid4().hex[:6]}",
        "boxId": box_id if box_id is not None else next(_box_ids),
        "phone": phone,
    }
    if place is not None:
        body["place"] = place

    res = client.post("/users", json=body)
    assert res.status_code == 201, res.text
    return res.json()


def create_payment(client, owner_id: str, *, pay_for: str, pay_date: str | None = None,
                   paid=100, balance=None) -> dict:
    body = {
        "ownerId": owner_id,
        "payFor": pay_for,
        "payDate": pay_date or f"{pay_for[:7]}-05",
        "paid": paid,
    }
    if balance is not None:
        body["balance"] = balance

    res = client.post("/payments", json=body)
    assert res.status_code == 201, res.text
    return res.json()


def count_payments(db: Session, owner_id: str) -> int:
    return len(db.scalars(select(Payment).where(Payment.owner_id == uuid.UUID(owner_id))).all())
