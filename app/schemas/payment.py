import uuid
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.owner import OwnerResponse


# 금액은 원본 JSON 값 그대로 받는다 (true → 1.0 같은 암묵 변환 방지).
# 숫자 / 숫자 문자열 여부 검증은 service 계층 coerce_amount 에서 수행
AmountInput = Any

_request_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class PaymentCreateRequest(BaseModel):
    """필수 필드 누락 여부는 validate_and_normalize 에서 한 번에 검사한다."""

    model_config = _request_config

    owner_id: Optional[uuid.UUID] = None
    pay_for: Optional[str] = Field(default=None, examples=["2024-03"])
    pay_date: Optional[str] = Field(default=None, examples=["2024-03-05"])
    paid: Optional[AmountInput] = Field(default=None, examples=[100])
    balance: Optional[AmountInput] = Field(default=None, examples=[-20])


class PaymentUpdateRequest(BaseModel):
    """수정 가능한 필드만 허용. ownerId / id 등 그 외 키는 400으로 거절된다."""

    model_config = _request_config

    pay_for: Optional[str] = None
    pay_date: Optional[str] = None
    paid: Optional[AmountInput] = None
    balance: Optional[AmountInput] = None


class PaymentResponse(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    pay_for: date
    pay_date: date
    paid: float
    balance: float
    month: int
    year: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class OwnerSummaryResponse(BaseModel):
    owner: OwnerResponse
    payments: List[PaymentResponse]
    total_paid: float = 0
    total_balance: float = 0
    count: int = 0

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
