"""
main.py

FastAPI 애플리케이션 진입점(Entry Point).

이 파일은 서버 실행 시 가장 먼저 로드되며,
애플리케이션 전반의 설정과 라우터 등록을 담당한다.

주요 역할:
- FastAPI 앱 인스턴스 생성 (create_app)
- 로깅 / CORS 미들웨어 / 예외 핸들러 설정
- 도메인별 라우터(users, payments) 등록
- DB 커넥션 풀 생명주기 관리 (시작 시 생성, 종료 시 정리)
- 헬스 체크 및 DB 연결 상태 확인용 엔드포인트 제공

설계 원칙:
- 비즈니스 로직은 포함하지 않고 설정/조립 역할만 수행
- 실제 기능은 routers / services 계층에 위임
- DB 연결은 전역 싱글톤이 아닌 lifespan에서 생성한 Database 객체를 app.state로 주입

관련 파일:
- app.core.config        : 환경 변수 및 설정 로드
- app.core.deps          : DB 세션 의존성
- app.core.errors        : 도메인 예외 및 에러 응답 변환
- app.db.session         : Database (engine / session factory)
- app.routers.*          : 기능별 API 라우터

"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy import text

from app.core.config import Settings, settings as default_settings
from app.core.deps import get_db
from app.core.errors import register_exception_handlers
from app.core.logging import configure_logging
from app.db.session import Database
from app.routers import owners, payments

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.db = Database(settings.DATABASE_URL)
        logger.info("%s started", settings.APP_TITLE)
        try:
            yield
        finally:
            app.state.db.dispose()
            logger.info("%s stopped", settings.APP_TITLE)

    app = FastAPI(title=settings.APP_TITLE, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(owners.router)
    app.include_router(payments.router)

    """
    서버 헬스 체크 엔드포인트

    - 애플리케이션 프로세스가 정상 동작 중인지 확인
    - 로드밸런서 / 배포 환경에서 서버 상태 확인 용도

    """
    @app.get("/health")
    def health():
        return {"status": "ok"}

    """
    데이터베이스 연결 상태 확인 엔드포인트

    - 간단한 SELECT 1 쿼리를 통해 DB 연결 여부 확인
    - 서버는 살아 있으나 DB가 죽은 상황을 분리해서 감지 가능

    """
    @app.get("/db-ping")
    def db_ping(db: Session = Depends(get_db)):
        value = db.execute(text("SELECT 1")).scalar_one()
        return {"db": "ok", "value": value}

    return app


app = create_app()
