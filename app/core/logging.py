"""
logging.py

애플리케이션 로깅 설정.

- 앱 생성 시 한 번만 호출
- 각 모듈은 logging.getLogger(__name__)으로 로거를 얻어 사용

"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# configure_logging 이 root 로거에 설치한 핸들러
_handler: logging.Handler | None = None


def configure_logging(level: str = "INFO") -> None:
    global _handler

    root = logging.getLogger()
    root.setLevel(level.upper())

    # uvicorn --reload 등으로 여러 번 호출되어도 핸들러는 하나만 유지
    if _handler is not None and _handler in root.handlers:
        return

    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(_handler)
