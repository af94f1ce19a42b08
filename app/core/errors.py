"""
errors.py

도메인 예외(Domain Exception) 정의 및 HTTP 에러 응답 변환.

서비스 계층은 HTTP를 모르는 상태로 아래 예외만 발생시키고,
main.py에 등록된 예외 핸들러가 이를 일관된 JSON 형태로 변환한다.

에러 응답 형식:
    {"error": "<message>", "details": <optional>}

설계 원칙:
- 클라이언트 입력 오류(4xx)와 저장소 오류(5xx)를 명확히 구분
- 저장소 오류는 재시도하지 않고 즉시 호출자에게 전달
- FastAPI 기본 HTTPException / 요청 검증 오류도 같은 형식으로 통일

관련 파일:
- app.services.*         : 예외 발생 지점
- app.main               : 예외 핸들러 등록

"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class DomainError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Bad request"

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class MissingField(DomainError):
    def __init__(self, fields: list[str]):
        self.fields = list(fields)
        super().__init__(
            f"Missing required fields: {', '.join(self.fields)}",
            details={"fields": self.fields},
        )


class InvalidDate(DomainError):
    message = "Invalid date"


class InvalidAmount(DomainError):
    message = "Invalid amount"


class OwnerNotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class DuplicatePeriod(DomainError):
    status_code = status.HTTP_409_CONFLICT
    message = "Payment already exists for this month"

    def __init__(self, existing_payment: Any = None):
        self.existing_payment = existing_payment
        super().__init__(details={"existingPayment": existing_payment})


class DuplicateKey(DomainError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} already exists", details={"field": field})


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class StorageError(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Storage error"


def error_body(message: str, details: Any = None) -> dict:
    body = {"error": message}
    if details is not None:
        body["details"] = details
    return body


"""
도메인 예외 핸들러

- DuplicatePeriod 의 경우 충돌한 납부 레코드가 details.existingPayment 로 전달됨
- StorageError 는 traceback과 함께 ERROR 로그로 남김

"""
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if isinstance(exc, StorageError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc.__cause__ or exc)

    details = exc.details
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, details))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


"""
요청 검증 오류 핸들러

- 잘못된 ID 형식, 알 수 없는 필드, 타입 오류 등은 모두 400으로 응답
- 모든 오류가 필드 누락(missing)인 경우 누락된 필드 이름을 메시지에 나열

"""
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    missing = [str(e["loc"][-1]) for e in errors if e.get("type") == "missing"]

    if errors and len(missing) == len(errors):
        message = f"Missing required fields: {', '.join(missing)}"
    else:
        message = "Invalid request"

    details = [
        {"loc": [str(part) for part in e.get("loc", ())], "msg": e.get("msg"), "type": e.get("type")}
        for e in errors
    ]
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message, details))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
