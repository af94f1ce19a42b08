"""
services/owners.py

소유자(Owner) 저장소 로직 모음.

이 파일은 Owner 생성, 조회, 검색, 수정, 삭제와
name / boxId 고유성 검증을 담당한다.

라우터는 이 파일의 함수를 호출하고
트랜잭션(commit / rollback)과 응답 변환만 처리한다.

설계 원칙:
- 고유성의 최종 보장은 DB 제약(unique / partial unique index)
- 애플리케이션 사전 검사는 친절한 에러 메시지를 위한 fast-path
- DB 제약 위반(IntegrityError)도 DuplicateKey로 변환하여 필드 단위로 전달
- Owner 삭제 시 납부 기록은 삭제하지 않음 (orphan 유지)

관련 파일:
- app.models.owner       : Owner 모델
- app.routers.owners     : /users API

"""

import logging
import uuid

from sqlalchemy import String, cast, desc, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateKey, NotFound, StorageError
from app.db.base import utcnow
from app.models.owner import Owner

logger = logging.getLogger(__name__)


# DB 에러 메시지에서 충돌 필드를 찾기 위한 표식
# (PostgreSQL: 제약/인덱스 이름, SQLite: "owners.<column>")
_UNIQUE_MARKERS = {
    "name": ("owners_name_key", "owners.name"),
    "boxId": ("uq_owners_box_id_set", "owners.box_id"),
}


def _conflicting_field(exc: IntegrityError) -> str | None:
    message = str(exc.orig)
    for field, markers in _UNIQUE_MARKERS.items():
        if any(marker in message for marker in markers):
            return field
    return None


def _flush(db: Session) -> None:
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        field = _conflicting_field(e)
        if field:
            logger.warning("owner rejected by unique constraint on %s", field)
            raise DuplicateKey(field) from e
        raise StorageError(f"Database error: {type(e).__name__}") from e


"""
name / boxId 중복 사전 검사

- 수정 시에는 자기 자신(exclude_id)을 비교 대상에서 제외
- boxId 0은 "미지정"이므로 검사하지 않음

"""

def ensure_unique(db: Session, *, name: str, box_id: int, exclude_id: uuid.UUID | None = None) -> None:
    q = select(Owner.id).where(Owner.name == name)
    if exclude_id is not None:
        q = q.where(Owner.id != exclude_id)
    if db.scalar(q) is not None:
        raise DuplicateKey("name")

    if box_id:
        q = select(Owner.id).where(Owner.box_id == box_id)
        if exclude_id is not None:
            q = q.where(Owner.id != exclude_id)
        if db.scalar(q) is not None:
            raise DuplicateKey("boxId")


def create_owner(
    db: Session,
    *,
    name: str,
    box_id: int = 0,
    phone: str | None = None,
    place: str | None = None,
) -> Owner:
    name = name.strip()
    ensure_unique(db, name=name, box_id=box_id)

    owner = Owner(name=name, box_id=box_id, phone=phone, place=place)
    db.add(owner)
    _flush(db)

    logger.info("owner created id=%s name=%r box_id=%s", owner.id, owner.name, owner.box_id)
    return owner


def get_owner(db: Session, owner_id: uuid.UUID) -> Owner:
    owner = db.get(Owner, owner_id)
    if not owner:
        raise NotFound("User not found")
    return owner


# LIKE 특수문자(\, %, _) 이스케이프 후 부분 일치 패턴
def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _column_filters(pattern: str) -> dict:
    return {
        "name": Owner.name.ilike(pattern, escape="\\"),
        "boxId": cast(Owner.box_id, String).like(pattern, escape="\\"),
        "phone": Owner.phone.ilike(pattern, escape="\\"),
        "place": Owner.place.ilike(pattern, escape="\\"),
    }


"""
Owner 목록 조회

- 생성 시각 기준 최신순
- q 가 주어지면 field 기준 대소문자 무시 부분 일치 검색
  (all: name / boxId / phone / place 중 하나라도 일치)
- name / box_id / phone / place 는 필드별 부분 일치 필터, 여러 개면 모두 만족(AND)
- 공백뿐인 값은 무시

"""

def list_owners(
    db: Session,
    *,
    q: str | None = None,
    field: str = "all",
    name: str | None = None,
    box_id: str | int | None = None,
    phone: str | None = None,
    place: str | None = None,
) -> list[Owner]:
    stmt = select(Owner)

    if q and q.strip():
        columns = _column_filters(_like_pattern(q.strip()))
        if field == "all":
            stmt = stmt.where(or_(*columns.values()))
        else:
            stmt = stmt.where(columns[field])

    for key, value in (("name", name), ("boxId", box_id), ("phone", phone), ("place", place)):
        if value is None or not str(value).strip():
            continue
        stmt = stmt.where(_column_filters(_like_pattern(str(value).strip()))[key])

    return list(db.scalars(stmt.order_by(desc(Owner.created_at), desc(Owner.id))).all())


# PUT: 변경 가능한 필드 전체 교체
def update_owner(
    db: Session,
    owner_id: uuid.UUID,
    *,
    name: str,
    box_id: int,
    phone: str | None,
    place: str | None,
) -> Owner:
    owner = get_owner(db, owner_id)

    name = name.strip()
    ensure_unique(db, name=name, box_id=box_id, exclude_id=owner.id)

    owner.name = name
    owner.box_id = box_id
    owner.phone = phone
    owner.place = place
    owner.updated_at = utcnow()
    _flush(db)

    logger.info("owner updated id=%s", owner.id)
    return owner


"""
Owner 삭제

- 납부(Payment) 기록은 함께 삭제하지 않는다 (owner_id만 남은 orphan 상태)

"""

def delete_owner(db: Session, owner_id: uuid.UUID) -> Owner:
    owner = get_owner(db, owner_id)
    db.delete(owner)
    _flush(db)

    logger.info("owner deleted id=%s (payments kept)", owner_id)
    return owner
