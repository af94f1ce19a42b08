"""
payments.py

납부(Payment) 관리 API 모음.

주요 기능:
- 납부 목록 조회 (ownerId / month / year 필터)
- 납부 생성 (월별 1건 제한)
- 납부 단건 조회 / 부분 수정 / 삭제

설계 원칙:
- 검증/정규화/중복 검사는 service 계층(app.services.payments)에 위임
- 이 라우터는 요청/응답 처리와 트랜잭션(commit / rollback)에만 집중
- 같은 달 납부가 이미 있으면 409와 함께 기존 레코드를 반환

관련 파일:
- app.services.payments    : 납부 검증 및 저장소 로직
- app.services.periods     : 날짜 정규화
- app.schemas.payment      : 요청/응답 스키마
"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette import status

from app.core.deps import get_db
from app.core.errors import DomainError, StorageError
from app.schemas.payment import PaymentCreateRequest, PaymentResponse, PaymentUpdateRequest
from app.services.payments import (
    create_payment,
    delete_payment,
    get_payment,
    list_payments,
    update_payment,
    validate_and_normalize,
)

router = APIRouter(prefix="/payments", tags=["payments"])


"""
납부 목록 조회 API

- ownerId 지정 시 해당 소유자 납부만
- month + year 지정 시 해당 월, year 만 지정 시 해당 연도 전체
- payFor 내림차순, payDate 내림차순 정렬

"""
@router.get("", response_model=list[PaymentResponse])
def list_all_payments(
    owner_id: uuid.UUID | None = Query(default=None, alias="ownerId"),
    month: str | None = Query(default=None, description="예: 03"),
    year: str | None = Query(default=None, description="예: 2024"),
    db: Session = Depends(get_db),
):
    return list_payments(db, owner_id=owner_id, month=month, year=year)


"""
납부 생성 API

- 필수: ownerId, payFor, payDate, paid
- 존재하지 않는 소유자 404, 같은 달 중복 409 (기존 레코드 포함)

"""
@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def create_new_payment(body: PaymentCreateRequest, db: Session = Depends(get_db)):
    try:
        data = validate_and_normalize(db, body.model_dump(by_alias=True))
        payment = create_payment(db, data)
        db.commit()
        db.refresh(payment)
        return payment
    except DomainError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Database error: {type(e).__name__}") from e


@router.get("/{payment_id}", response_model=PaymentResponse)
def read_payment(payment_id: uuid.UUID, db: Session = Depends(get_db)):
    return get_payment(db, payment_id)


"""
납부 수정 API

- payFor / payDate / paid / balance 중 전달된 필드만 변경
- ownerId, id 등 그 외 키는 400으로 거절
- payFor 변경 시 다른 납부와 같은 달이면 409

"""
@router.put("/{payment_id}", response_model=PaymentResponse)
def modify_payment(payment_id: uuid.UUID, body: PaymentUpdateRequest, db: Session = Depends(get_db)):
    try:
        payment = update_payment(db, payment_id, body.model_dump(exclude_unset=True))
        db.commit()
        db.refresh(payment)
        return payment
    except DomainError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Database error: {type(e).__name__}") from e


@router.delete("/{payment_id}", response_model=PaymentResponse)
def remove_payment(payment_id: uuid.UUID, db: Session = Depends(get_db)):
    try:
        payment = delete_payment(db, payment_id)
        deleted = PaymentResponse.model_validate(payment)
        db.commit()
        return deleted
    except DomainError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Database error: {type(e).__name__}") from e
