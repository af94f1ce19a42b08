"""
services/periods.py

납부 기간(payFor) / 납부일(payDate) 정규화 유틸리티.

주요 기능:
- payFor  : 'YYYY-MM', 'YYYY-MM-DD', ISO datetime 문자열 → 해당 월 1일(date)
- payDate : ISO 또는 자유 형식 날짜 문자열 → date
- 월 단위 반개구간 [해당 월 1일, 다음 달 1일) 계산
- 목록 조회용 month / year 쿼리 파라미터 해석

설계 원칙:
- 유효한 달력 날짜가 아니면 모두 InvalidDate
- DB / HTTP 의존성 없음 (순수 함수)

관련 파일:
- app.services.payments  : 납부 검증 및 조회에서 사용

"""

import re
from datetime import date, datetime

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from app.core.errors import InvalidDate


_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")

# 자유 형식 payDate 파싱 시 누락된 날짜 요소 검출용 기본값
_FILL_A = datetime(2000, 1, 1)
_FILL_B = datetime(2001, 2, 2)


def _first_of_month(day: date) -> date:
    return day.replace(day=1)


def _parse_iso(value: str, field: str) -> date:
    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, OverflowError):
        raise InvalidDate(f"Invalid {field} date format. Use YYYY-MM-DD, YYYY-MM, or ISO string")
    return parsed.date()


"""
납부 대상 월(payFor) 정규화

- 'YYYY-MM' 은 해당 월 1일로 해석
- 'YYYY-MM-DD' / ISO datetime 은 그대로 파싱한 뒤 월 1일로 맞춤
- '2024-03' 과 '2024-03-01' 은 동일한 값이 된다

"""

def normalize_pay_for(value) -> date:
    if isinstance(value, datetime):
        return _first_of_month(value.date())
    if isinstance(value, date):
        return _first_of_month(value)
    if not isinstance(value, str) or not value.strip():
        raise InvalidDate("Invalid payFor date format. Use YYYY-MM-DD, YYYY-MM, or ISO string")

    value = value.strip()
    m = _MONTH_RE.match(value)
    if m:
        year, month = int(m.group(1)), int(m.group(2))
        if month < 1 or month > 12:
            raise InvalidDate("month must be between 01 and 12")
        return date(year, month, 1)

    return _first_of_month(_parse_iso(value, "payFor"))


"""
실제 납부일(payDate) 정규화

- ISO 형식을 먼저 시도하고, 실패하면 'March 5, 2024' 같은 자유 형식도 허용
- 어떤 형식이든 유효한 달력 날짜가 아니면 InvalidDate

"""

def normalize_pay_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidDate("Invalid payDate format")

    value = value.strip()
    try:
        return date_parser.isoparse(value).date()
    except (ValueError, OverflowError):
        pass

    # 연/월/일 중 빠진 부분을 오늘 날짜로 채우지 않도록
    # 서로 다른 기본값 두 개로 파싱해 결과가 다르면 거절
    try:
        first = date_parser.parse(value, default=_FILL_A)
        second = date_parser.parse(value, default=_FILL_B)
    except (ValueError, OverflowError):
        raise InvalidDate("Invalid payDate format")
    if first.date() != second.date():
        raise InvalidDate("payDate must include year, month and day")
    return first.date()


# 해당 월의 [1일, 다음 달 1일) 구간
def month_bounds(day: date) -> tuple[date, date]:
    start = _first_of_month(day)
    return start, start + relativedelta(months=1)


"""
목록 조회용 month / year 필터 해석

- month + year : 해당 월 [1일, 다음 달 1일)  -> (start, end, end_inclusive=False)
- year 만      : 해당 연도 [1월 1일, 12월 31일] -> (start, end, end_inclusive=True)
- 그 외(month 만 / 둘 다 없음) : None

"""

def parse_month_filter(month: str | int | None, year: str | int | None):
    if year in (None, ""):
        return None

    try:
        y = int(year)
    except (TypeError, ValueError):
        raise InvalidDate("year must be a number")
    if y < 1 or y > 9999:
        raise InvalidDate("year out of range")

    if month not in (None, ""):
        try:
            mo = int(month)
        except (TypeError, ValueError):
            raise InvalidDate("month must be between 01 and 12")
        if mo < 1 or mo > 12:
            raise InvalidDate("month must be between 01 and 12")
        start, end = month_bounds(date(y, mo, 1))
        return start, end, False

    return date(y, 1, 1), date(y, 12, 31), True
