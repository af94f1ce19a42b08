"""
owner.py

소유자(Owner) 모델 정의 파일.

사서함(box) 번호가 부여된 개인/단체 레코드로,
납부(Payment) 기록은 owner_id로 이 모델을 참조한다.

"""

import uuid

from sqlalchemy import Index, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin


"""
소유자(Owner) 모델

- name   : 고유 이름 (앞뒤 공백 제거 후 저장)
- box_id : 사서함 번호, 0은 "미지정"으로 취급
- phone  : 국제 전화번호 형식 (선택)
- place  : 자유 입력 위치 정보 (선택)

- name 은 전체 unique
- box_id 는 0이 아닌 경우에만 unique (partial unique index)

"""

class Owner(TimestampMixin, Base):
    __tablename__ = "owners"
    __table_args__ = (
        Index(
            "uq_owners_box_id_set",
            "box_id",
            unique=True,
            postgresql_where=text("box_id <> 0"),
            sqlite_where=text("box_id <> 0"),
        ),
        Index("ix_owners_place", "place"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    box_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    phone: Mapped[str | None] = mapped_column(String(16), nullable=True)
    place: Mapped[str | None] = mapped_column(String(255), nullable=True)
