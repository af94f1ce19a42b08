import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.core.config import Settings, settings
from app.db.base import Base
from app.db.session import Database

# ✅ 모델 import (Base.metadata에 테이블 등록)
import app.models  # noqa: F401


# TEST_DATABASE_URL 이 없으면 임시 SQLite 파일 사용
TEST_DB_URL = (
    getattr(settings, "TEST_DATABASE_URL", None)
    or os.getenv("TEST_DATABASE_URL")
    or f"sqlite:///{Path(tempfile.mkdtemp()) / 'boxledger_test.db'}"
)

database = Database(TEST_DB_URL)


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """테스트 전체 시작/종료 때만 스키마 생성/삭제"""
    Base.metadata.drop_all(bind=database.engine)
    Base.metadata.create_all(bind=database.engine)
    yield
    Base.metadata.drop_all(bind=database.engine)
    database.dispose()


@pytest.fixture(autouse=True)
def clean_tables():
    """각 테스트마다 데이터 초기화 (테이블은 유지, row만 삭제)"""
    with database.engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def db_session():
    """테스트에서 직접 DB 조작할 때 쓰는 세션"""
    session = database.session()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client():
    fastapi_app = create_app(Settings(DATABASE_URL=TEST_DB_URL, LOG_LEVEL="DEBUG"))
    with TestClient(fastapi_app) as c:
        yield c
