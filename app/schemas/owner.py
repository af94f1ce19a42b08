import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


PHONE_PATTERN = r"^\+?[1-9]\d{1,14}$"

# 검색 대상 필드 (all = 전체 필드 중 하나라도 일치)
SearchField = Literal["all", "name", "boxId", "phone", "place"]


class OwnerCreateRequest(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="forbid",
    )

    name: str = Field(..., min_length=1, max_length=100, examples=["Kim Minsu"])
    box_id: int = Field(..., gt=0, examples=[101])
    phone: str = Field(..., pattern=PHONE_PATTERN, examples=["+821012345678"])
    place: Optional[str] = Field(default=None, max_length=255)


# PUT은 변경 가능한 필드 전체를 교체 (id / 시각 필드는 받지 않음)
class OwnerUpdateRequest(OwnerCreateRequest):
    pass


class OwnerResponse(BaseModel):
    id: uuid.UUID
    name: str
    box_id: int
    phone: Optional[str]
    place: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
