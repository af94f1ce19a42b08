"""
납부(/payments) API 통합 테스트.
- 생성 후 단건 조회 시 정규화된 값 유지, 같은 달 중복 409(기존 레코드 포함, 저장소 변경 없음),
  필수 필드 / 날짜 / 금액 검증, owner 미존재 404,
  month / year 필터와 정렬, 수정 시 자기 자신 제외 중복 검사,
  소유자 요약(합계) 조회까지 확인한다.
"""

import uuid

from tests.helpers import count_payments, create_owner, create_payment


def test_create_payment_and_fetch_by_id(client):
    owner = create_owner(client)

    res = client.post(
        "/payments",
        json={"ownerId": owner["id"], "payFor": "2024-03", "payDate": "2024-03-05", "paid": "100", "balance": -20},
    )
    assert res.status_code == 201, res.text
    created = res.json()
    assert created["ownerId"] == owner["id"]
    assert created["payFor"] == "2024-03-01"
    assert created["payDate"] == "2024-03-05"
    assert created["paid"] == 100
    assert created["balance"] == -20
    assert created["month"] == 3
    assert created["year"] == 2024

    got = client.get(f"/payments/{created['id']}")
    assert got.status_code == 200, got.text
    assert got.json() == created


def test_balance_defaults_to_zero(client):
    owner = create_owner(client)
    created = create_payment(client, owner["id"], pay_for="2024-05-20T09:00:00Z", pay_date="2024-05-21")
    assert created["balance"] == 0
    assert created["payFor"] == "2024-05-01"


def test_duplicate_month_rejected_without_mutation(client, db_session):
    owner = create_owner(client)
    first = create_payment(client, owner["id"], pay_for="2024-03", paid=100)

    res = client.post(
        "/payments",
        json={"ownerId": owner["id"], "payFor": "2024-03-15", "payDate": "2024-03-20", "paid": 999},
    )
    assert res.status_code == 409, res.text
    body = res.json()
    assert body["error"] == "Payment already exists for this month"
    assert body["details"]["existingPayment"]["id"] == first["id"]
    assert body["details"]["existingPayment"]["paid"] == 100

    assert count_payments(db_session, owner["id"]) == 1
    assert client.get(f"/payments/{first['id']}").json() == first


def test_same_month_for_different_owners_allowed(client):
    a = create_owner(client)
    b = create_owner(client)
    create_payment(client, a["id"], pay_for="2024-03")
    create_payment(client, b["id"], pay_for="2024-03")


def test_missing_fields_are_named(client):
    owner = create_owner(client)

    res = client.post("/payments", json={"ownerId": owner["id"], "payFor": "2024-03"})
    assert res.status_code == 400, res.text
    assert res.json()["error"] == "Missing required fields: payDate, paid"
    assert res.json()["details"]["fields"] == ["payDate", "paid"]


def test_invalid_dates_rejected(client):
    owner = create_owner(client)

    for bad in ["2024-13", "not-a-date", ""]:
        res = client.post(
            "/payments",
            json={"ownerId": owner["id"], "payFor": bad, "payDate": "2024-03-05", "paid": 10},
        )
        assert res.status_code == 400, (bad, res.text)

    res = client.post(
        "/payments",
        json={"ownerId": owner["id"], "payFor": "2024-03", "payDate": "someday", "paid": 10},
    )
    assert res.status_code == 400, res.text
    assert res.json()["error"] == "Invalid payDate format"


def test_invalid_amounts_rejected(client):
    owner = create_owner(client)

    for paid in ["abc", -5]:
        res = client.post(
            "/payments",
            json={"ownerId": owner["id"], "payFor": "2024-03", "payDate": "2024-03-05", "paid": paid},
        )
        assert res.status_code == 400, (paid, res.text)

    res = client.post(
        "/payments",
        json={"ownerId": owner["id"], "payFor": "2024-03", "payDate": "2024-03-05", "paid": 10, "balance": "lots"},
    )
    assert res.status_code == 400, res.text
    assert res.json()["error"] == "balance must be a number"


# JSON 불리언은 숫자로 취급하지 않는다
def test_boolean_amounts_rejected(client):
    owner = create_owner(client)

    res = client.post(
        "/payments",
        json={"ownerId": owner["id"], "payFor": "2024-03", "payDate": "2024-03-05", "paid": True},
    )
    assert res.status_code == 400, res.text
    assert res.json()["error"] == "paid must be a number"

    res = client.post(
        "/payments",
        json={"ownerId": owner["id"], "payFor": "2024-03", "payDate": "2024-03-05", "paid": 10, "balance": False},
    )
    assert res.status_code == 400, res.text
    assert res.json()["error"] == "balance must be a number"

    created = create_payment(client, owner["id"], pay_for="2024-04")
    res = client.put(f"/payments/{created['id']}", json={"paid": True})
    assert res.status_code == 400, res.text
    assert res.json()["error"] == "paid must be a number"

    res = client.get("/payments", params={"ownerId": owner["id"]})
    assert [p["paid"] for p in res.json()] == [created["paid"]]


def test_owner_must_exist(client):
    res = client.post(
        "/payments",
        json={"ownerId": str(uuid.uuid4()), "payFor": "2024-03", "payDate": "2024-03-05", "paid": 10},
    )
    assert res.status_code == 404, res.text
    assert res.json()["error"] == "User not found"

    malformed = client.post(
        "/payments",
        json={"ownerId": "not-an-id", "payFor": "2024-03", "payDate": "2024-03-05", "paid": 10},
    )
    assert malformed.status_code == 400, malformed.text


def test_list_filters_by_month_and_year(client):
    owner = create_owner(client)
    other = create_owner(client)
    create_payment(client, owner["id"], pay_for="2024-02")
    march = create_payment(client, owner["id"], pay_for="2024-03")
    create_payment(client, owner["id"], pay_for="2024-04")
    dec = create_payment(client, owner["id"], pay_for="2024-12")
    create_payment(client, owner["id"], pay_for="2025-01")
    create_payment(client, other["id"], pay_for="2024-03")

    res = client.get("/payments", params={"ownerId": owner["id"], "month": "03", "year": "2024"})
    assert res.status_code == 200, res.text
    assert [p["id"] for p in res.json()] == [march["id"]]

    year = client.get("/payments", params={"ownerId": owner["id"], "year": "2024"}).json()
    assert [p["payFor"] for p in year] == ["2024-12-01", "2024-04-01", "2024-03-01", "2024-02-01"]
    assert year[0]["id"] == dec["id"]

    everything = client.get("/payments", params={"ownerId": owner["id"]}).json()
    assert len(everything) == 5
    assert everything[0]["payFor"] == "2025-01-01"

    bad = client.get("/payments", params={"month": "13", "year": "2024"})
    assert bad.status_code == 400

    malformed = client.get("/payments", params={"ownerId": "nope"})
    assert malformed.status_code == 400


def test_update_payment_keeps_own_month(client):
    owner = create_owner(client)
    payment = create_payment(client, owner["id"], pay_for="2024-03", paid=100)

    # 같은 달로 저장(no-op 포함)해도 자기 자신과는 충돌하지 않음
    res = client.put(f"/payments/{payment['id']}", json={"payFor": "2024-03", "paid": 120, "balance": 5})
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["paid"] == 120
    assert body["balance"] == 5
    assert body["payFor"] == "2024-03-01"
    assert body["ownerId"] == owner["id"]

    moved = client.put(f"/payments/{payment['id']}", json={"payFor": "2024-06-10"})
    assert moved.status_code == 200, moved.text
    assert moved.json()["payFor"] == "2024-06-01"
    assert moved.json()["month"] == 6
    assert moved.json()["year"] == 2024


def test_update_payment_into_taken_month_conflicts(client):
    owner = create_owner(client)
    march = create_payment(client, owner["id"], pay_for="2024-03")
    april = create_payment(client, owner["id"], pay_for="2024-04")

    res = client.put(f"/payments/{april['id']}", json={"payFor": "2024-03"})
    assert res.status_code == 409, res.text
    assert res.json()["details"]["existingPayment"]["id"] == march["id"]

    assert client.get(f"/payments/{april['id']}").json()["payFor"] == "2024-04-01"


def test_update_payment_rejects_immutable_and_unknown_keys(client):
    owner = create_owner(client)
    other = create_owner(client)
    payment = create_payment(client, owner["id"], pay_for="2024-03")

    res = client.put(f"/payments/{payment['id']}", json={"ownerId": other["id"], "paid": 1})
    assert res.status_code == 400, res.text

    res = client.put(f"/payments/{payment['id']}", json={"memo": "x"})
    assert res.status_code == 400, res.text

    assert client.get(f"/payments/{payment['id']}").json()["ownerId"] == owner["id"]


def test_update_and_delete_missing_payment(client):
    missing = uuid.uuid4()
    assert client.put(f"/payments/{missing}", json={"paid": 1}).status_code == 404
    assert client.delete(f"/payments/{missing}").status_code == 404
    assert client.get(f"/payments/{missing}").status_code == 404
    assert client.get("/payments/123").status_code == 400


def test_delete_payment(client):
    owner = create_owner(client)
    payment = create_payment(client, owner["id"], pay_for="2024-03")

    res = client.delete(f"/payments/{payment['id']}")
    assert res.status_code == 200, res.text
    assert res.json()["id"] == payment["id"]
    assert client.get(f"/payments/{payment['id']}").status_code == 404

    # 삭제 후에는 같은 달 납부를 다시 만들 수 있음
    create_payment(client, owner["id"], pay_for="2024-03")


def test_owner_summary_totals(client):
    owner = create_owner(client)
    create_payment(client, owner["id"], pay_for="2024-01", paid=100, balance=-20)
    create_payment(client, owner["id"], pay_for="2024-02", paid=50, balance=10)

    res = client.get(f"/users/{owner['id']}/summary")
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["owner"]["id"] == owner["id"]
    assert body["totalPaid"] == 150
    assert body["totalBalance"] == -10
    assert body["count"] == 2
    assert [p["payFor"] for p in body["payments"]] == ["2024-02-01", "2024-01-01"]

    assert client.get(f"/users/{uuid.uuid4()}/summary").status_code == 404
