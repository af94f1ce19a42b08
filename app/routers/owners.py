"""
owners.py

소유자(Owner, API 경로상 "users") 관리 API 모음.

주요 기능:
- 소유자 목록 조회 (최신순, 필드별 검색)
- 소유자 생성 / 단건 조회 / 전체 필드 수정 / 삭제
- 소유자별 납부 내역 + 합계(totalPaid / totalBalance) 조회

설계 원칙:
- 비즈니스 로직은 service 계층(app.services.owners)에 위임
- 이 라우터는 요청/응답 처리와 트랜잭션(commit / rollback)에만 집중
- name / boxId 중복은 400, 존재하지 않는 소유자는 404

관련 파일:
- app.services.owners      : Owner 저장소 로직
- app.services.summary     : 납부 합계 계산
- app.schemas.owner        : 요청/응답 스키마
"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette import status

from app.core.deps import get_db
from app.core.errors import DomainError, StorageError
from app.schemas.owner import OwnerCreateRequest, OwnerResponse, OwnerUpdateRequest, SearchField
from app.schemas.payment import OwnerSummaryResponse, PaymentResponse
from app.services.owners import create_owner, delete_owner, get_owner, list_owners, update_owner
from app.services.payments import list_payments
from app.services.summary import summarize

router = APIRouter(prefix="/users", tags=["users"])


"""
소유자 목록 조회 API

- 생성 시각 기준 최신순
- q: 검색어 (대소문자 무시 부분 일치)
- field: 검색 대상 필드 (all / name / boxId / phone / place)
- name / boxId / phone / place: 필드별 부분 일치 필터, 함께 주면 모두 만족하는 소유자만
- 빈 값(공백 포함)은 무시

"""
@router.get("", response_model=list[OwnerResponse])
def list_all_owners(
    q: str | None = Query(default=None, description="검색어"),
    field: SearchField = Query(default="all"),
    name: str | None = Query(default=None),
    box_id: str | None = Query(default=None, alias="boxId"),
    phone: str | None = Query(default=None),
    place: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    return list_owners(db, q=q, field=field, name=name, box_id=box_id, phone=phone, place=place)


"""
소유자 생성 API

- name / boxId / phone 필수, place 선택
- name 또는 boxId 중복 시 400 ("name already exists" / "boxId already exists")

"""
@router.post("", response_model=OwnerResponse, status_code=status.HTTP_201_CREATED)
def create_new_owner(body: OwnerCreateRequest, db: Session = Depends(get_db)):
    try:
        owner = create_owner(
            db,
            name=body.name,
            box_id=body.box_id,
            phone=body.phone,
            place=body.place,
        )
        db.commit()
        db.refresh(owner)
        return owner
    except DomainError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Database error: {type(e).__name__}") from e


@router.get("/{owner_id}", response_model=OwnerResponse)
def read_owner(owner_id: uuid.UUID, db: Session = Depends(get_db)):
    return get_owner(db, owner_id)


"""
소유자 수정 API

- 변경 가능한 필드(name / boxId / phone / place) 전체 교체
- 정의되지 않은 키(id, createdAt 등)는 400으로 거절

"""
@router.put("/{owner_id}", response_model=OwnerResponse)
def replace_owner(owner_id: uuid.UUID, body: OwnerUpdateRequest, db: Session = Depends(get_db)):
    try:
        owner = update_owner(
            db,
            owner_id,
            name=body.name,
            box_id=body.box_id,
            phone=body.phone,
            place=body.place,
        )
        db.commit()
        db.refresh(owner)
        return owner
    except DomainError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Database error: {type(e).__name__}") from e


"""
소유자 삭제 API

- 삭제된 레코드를 그대로 반환
- 해당 소유자의 납부 기록은 삭제하지 않음

"""
@router.delete("/{owner_id}", response_model=OwnerResponse)
def remove_owner(owner_id: uuid.UUID, db: Session = Depends(get_db)):
    try:
        owner = delete_owner(db, owner_id)
        # commit 이후에는 삭제된 객체 속성에 접근할 수 없으므로 먼저 직렬화
        deleted = OwnerResponse.model_validate(owner)
        db.commit()
        return deleted
    except DomainError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Database error: {type(e).__name__}") from e


"""
소유자 납부 요약 조회 API

- 소유자 정보 + 납부 내역(payFor / payDate 내림차순) + 합계
- 합계는 요청마다 다시 계산

"""
@router.get("/{owner_id}/summary", response_model=OwnerSummaryResponse)
def owner_summary(owner_id: uuid.UUID, db: Session = Depends(get_db)):
    owner = get_owner(db, owner_id)
    payments = list_payments(db, owner_id=owner.id)
    totals = summarize(payments)

    return OwnerSummaryResponse(
        owner=OwnerResponse.model_validate(owner),
        payments=[PaymentResponse.model_validate(p) for p in payments],
        total_paid=totals.total_paid,
        total_balance=totals.total_balance,
        count=totals.count,
    )
