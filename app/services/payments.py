"""
services/payments.py

납부(Payment) 도메인의 검증 및 저장소 로직 모음.

이 파일은 납부 입력값 정규화/검증, 월별 중복 방지,
납부 생성/조회/수정/삭제를 담당한다.

라우터는 이 파일의 함수를 호출하여
검증/저장 결과를 받아 응답만 처리한다.

설계 원칙:
- owner 한 명당 같은 달(month/year)의 납부는 최대 1건
- 중복 검사는 사전 조회(fast-path) + DB unique 제약(owner_id, year, month) 이중 구조
- 수정 시 중복 검사에서 자기 자신은 제외
- owner_id 와 id 는 생성 이후 변경 불가

관련 파일:
- app.models.payment     : Payment 모델
- app.services.periods   : 날짜 정규화
- app.routers.payments   : /payments API

"""

import logging
import math
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    DomainError,
    DuplicatePeriod,
    InvalidAmount,
    MissingField,
    NotFound,
    OwnerNotFound,
    StorageError,
)
from app.db.base import utcnow
from app.models.owner import Owner
from app.models.payment import Payment
from app.schemas.payment import PaymentResponse
from app.services.periods import month_bounds, normalize_pay_date, normalize_pay_for, parse_month_filter

logger = logging.getLogger(__name__)


REQUIRED_FIELDS = ("ownerId", "payFor", "payDate", "paid")

# 수정 요청에서 항상 제거되는 필드 (식별자 / 소유자 참조)
IMMUTABLE_FIELDS = ("id", "owner_id", "ownerId")


@dataclass(frozen=True)
class NormalizedPayment:
    owner_id: uuid.UUID
    pay_for: date
    pay_date: date
    paid: float
    balance: float
    month: int
    year: int


"""
금액 변환

- 숫자 / 숫자 문자열만 허용, NaN / 무한대 불가
- allow_negative=False 이면 0 이상만 허용 (paid)

"""

def coerce_amount(value: Any, *, field: str, allow_negative: bool = True) -> float:
    if isinstance(value, bool):
        raise InvalidAmount(f"{field} must be a number")
    try:
        amount = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise InvalidAmount(f"{field} must be a number")

    if not math.isfinite(amount):
        raise InvalidAmount(f"{field} must be a number")
    if not allow_negative and amount < 0:
        raise InvalidAmount(f"{field} must not be negative")
    return amount


# 충돌 레코드는 세션 rollback / close 이후에도 응답에 쓸 수 있도록 즉시 직렬화
def _duplicate(existing: Payment) -> DuplicatePeriod:
    return DuplicatePeriod(PaymentResponse.model_validate(existing).model_dump(mode="json", by_alias=True))


def find_payment_for_month(
    db: Session,
    *,
    owner_id: uuid.UUID,
    pay_for: date,
    exclude_id: uuid.UUID | None = None,
) -> Payment | None:
    start, end = month_bounds(pay_for)
    q = (
        select(Payment)
        .where(Payment.owner_id == owner_id)
        .where(Payment.pay_for >= start)
        .where(Payment.pay_for < end)
    )
    if exclude_id is not None:
        q = q.where(Payment.id != exclude_id)
    return db.scalar(q.limit(1))


"""
납부 입력 검증 및 정규화

- 필수 필드: ownerId, payFor, payDate, paid (누락 시 전부 나열)
- payFor / payDate 날짜 정규화 (InvalidDate)
- paid / balance 숫자 변환 (InvalidAmount), balance 기본값 0
- owner 존재 확인 (OwnerNotFound)
- 같은 달 납부가 이미 있으면 DuplicatePeriod (충돌 레코드 포함)
- exclude_id: 수정 중인 레코드는 중복 비교에서 제외

raw 는 camelCase 키의 매핑 (PaymentCreateRequest.model_dump(by_alias=True))

"""

def validate_and_normalize(
    db: Session,
    raw: Mapping[str, Any],
    *,
    exclude_id: uuid.UUID | None = None,
) -> NormalizedPayment:
    missing = [f for f in REQUIRED_FIELDS if raw.get(f) is None]
    if missing:
        raise MissingField(missing)

    pay_for = normalize_pay_for(raw["payFor"])
    pay_date = normalize_pay_date(raw["payDate"])

    paid = coerce_amount(raw["paid"], field="paid", allow_negative=False)
    balance = raw.get("balance")
    balance = 0.0 if balance in (None, "") else coerce_amount(balance, field="balance")

    owner_id = raw["ownerId"]
    if not isinstance(owner_id, uuid.UUID):
        try:
            owner_id = uuid.UUID(str(owner_id))
        except ValueError:
            raise DomainError("Invalid user ID format")

    if db.get(Owner, owner_id) is None:
        raise OwnerNotFound()

    existing = find_payment_for_month(db, owner_id=owner_id, pay_for=pay_for, exclude_id=exclude_id)
    if existing:
        logger.warning("duplicate payment rejected owner=%s period=%s", owner_id, pay_for.strftime("%Y-%m"))
        raise _duplicate(existing)

    return NormalizedPayment(
        owner_id=owner_id,
        pay_for=pay_for,
        pay_date=pay_date,
        paid=paid,
        balance=balance,
        month=pay_for.month,
        year=pay_for.year,
    )


"""
DB flush 및 unique 제약 위반 처리

- 사전 검사와 insert 사이의 경쟁 상태(race)는 DB 제약이 최종적으로 거절
- 제약 위반 시 rollback 후 이미 존재하는 레코드를 찾아 DuplicatePeriod로 변환

"""

def _flush(db: Session, *, owner_id: uuid.UUID, pay_for: date, exclude_id: uuid.UUID | None = None) -> None:
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        existing = find_payment_for_month(db, owner_id=owner_id, pay_for=pay_for, exclude_id=exclude_id)
        if existing:
            logger.warning("duplicate payment rejected by constraint owner=%s", owner_id)
            raise _duplicate(existing) from e
        raise StorageError(f"Database error: {type(e).__name__}") from e


def create_payment(db: Session, data: NormalizedPayment) -> Payment:
    payment = Payment(
        owner_id=data.owner_id,
        pay_for=data.pay_for,
        pay_date=data.pay_date,
        paid=data.paid,
        balance=data.balance,
        month=data.month,
        year=data.year,
    )
    db.add(payment)
    _flush(db, owner_id=data.owner_id, pay_for=data.pay_for)

    logger.info("payment created id=%s owner=%s period=%04d-%02d", payment.id, payment.owner_id, payment.year, payment.month)
    return payment


def get_payment(db: Session, payment_id: uuid.UUID) -> Payment:
    payment = db.get(Payment, payment_id)
    if not payment:
        raise NotFound("Payment not found")
    return payment


"""
납부 목록 조회

- owner_id 지정 시 해당 owner 납부만
- month + year : 해당 월만, year 만 : 해당 연도 전체 (양 끝 포함)
- payFor 내림차순, 같은 달이면 payDate 내림차순

"""

def list_payments(
    db: Session,
    *,
    owner_id: uuid.UUID | None = None,
    month: str | int | None = None,
    year: str | int | None = None,
) -> list[Payment]:
    q = select(Payment)
    if owner_id is not None:
        q = q.where(Payment.owner_id == owner_id)

    period = parse_month_filter(month, year)
    if period:
        start, end, end_inclusive = period
        q = q.where(Payment.pay_for >= start)
        q = q.where(Payment.pay_for <= end if end_inclusive else Payment.pay_for < end)

    q = q.order_by(desc(Payment.pay_for), desc(Payment.pay_date))
    return list(db.scalars(q).all())


"""
납부 수정

- changes 는 수정 가능한 필드만 담은 매핑 (snake_case, 미지정 키는 생략)
- id / owner_id 는 들어와도 제거
- payFor 변경 시 month / year 재계산 및 자기 자신 제외 중복 검사

"""

def update_payment(db: Session, payment_id: uuid.UUID, changes: Mapping[str, Any]) -> Payment:
    payment = get_payment(db, payment_id)
    changes = {k: v for k, v in changes.items() if k not in IMMUTABLE_FIELDS}

    missing = [
        alias for key, alias in (("pay_for", "payFor"), ("pay_date", "payDate"), ("paid", "paid"))
        if key in changes and changes[key] is None
    ]
    if missing:
        raise MissingField(missing)

    if "pay_for" in changes:
        pay_for = normalize_pay_for(changes["pay_for"])
        if pay_for != payment.pay_for:
            existing = find_payment_for_month(db, owner_id=payment.owner_id, pay_for=pay_for, exclude_id=payment.id)
            if existing:
                logger.warning("duplicate payment rejected on update id=%s", payment.id)
                raise _duplicate(existing)
        payment.pay_for = pay_for
        payment.month = pay_for.month
        payment.year = pay_for.year

    if "pay_date" in changes:
        payment.pay_date = normalize_pay_date(changes["pay_date"])

    if "paid" in changes:
        payment.paid = coerce_amount(changes["paid"], field="paid", allow_negative=False)

    if "balance" in changes:
        balance = changes["balance"]
        payment.balance = 0.0 if balance in (None, "") else coerce_amount(balance, field="balance")

    payment.updated_at = utcnow()
    _flush(db, owner_id=payment.owner_id, pay_for=payment.pay_for, exclude_id=payment.id)

    logger.info("payment updated id=%s fields=%s", payment.id, sorted(changes))
    return payment


def delete_payment(db: Session, payment_id: uuid.UUID) -> Payment:
    payment = get_payment(db, payment_id)
    db.delete(payment)
    db.flush()

    logger.info("payment deleted id=%s", payment_id)
    return payment
