"""
session.py

데이터베이스 엔진 및 세션(Session) 관리 파일.

전역 싱글톤 엔진 대신 Database 객체를 명시적으로 생성하여
앱 시작 시 초기화하고(lifespan), 종료 시 커넥션 풀을 정리한다.

FastAPI 의존성(get_db)을 통해
요청 단위로 세션을 생성/종료하는 구조를 지원한다.

설계 원칙:
- DB 연결 설정은 한 곳에서만 정의
- 세션 생성/종료 책임을 명확히 분리
- pool_pre_ping=True로 유휴 연결 오류 방지

관련 파일:
- app.main               : lifespan에서 Database 생성 / dispose
- app.core.deps          : get_db 의존성

"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, url: str, **engine_kwargs):
        connect_args = {}
        # SQLite는 스레드 간 커넥션 공유를 허용해야 TestClient / uvicorn 워커에서 동작
        if make_url(url).get_backend_name() == "sqlite":
            connect_args["check_same_thread"] = False

        # pool_pre_ping=True:
        #   장시간 idle 후 끊어진 DB 커넥션을 자동으로 감지/재연결
        self.engine = create_engine(
            url,
            pool_pre_ping=True,
            connect_args=connect_args,
            **engine_kwargs,
        )

        # 요청 단위로 사용할 세션 팩토리
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )
        logger.info("database engine created for %s", self.engine.url.render_as_string(hide_password=True))

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("database connection pool closed")
