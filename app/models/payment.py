import uuid
from datetime import date

from sqlalchemy import Date, Float, Index, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin


class Payment(TimestampMixin, Base):
    """월별 '납부' 레코드.

    - pay_for: 납부 대상 월, 항상 해당 월 1일로 저장
    - pay_date: 실제 납부일
    - month / year: pay_for에서 파생, 조회 편의 및 월별 unique 제약용
    - owner_id: FK 없음. owner 삭제 시 납부 기록은 그대로 남는다
    """

    __tablename__ = "payments"
    __table_args__ = (
        UniqueConstraint("owner_id", "year", "month", name="uq_payments_owner_period"),
        Index("ix_payments_owner_id_pay_for", "owner_id", "pay_for"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    pay_for: Mapped[date] = mapped_column(Date, nullable=False)
    pay_date: Mapped[date] = mapped_column(Date, nullable=False)

    paid: Mapped[float] = mapped_column(Float, nullable=False)
    balance: Mapped[float] = mapped_column(Float, nullable=False, default=0, server_default="0")

    month: Mapped[int] = mapped_column(Integer, nullable=False)  # 1-12
    year: Mapped[int] = mapped_column(Integer, nullable=False)
