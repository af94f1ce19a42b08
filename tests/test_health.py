import logging

from app.core import logging as app_logging


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

def test_db_ping(client):
    r = client.get("/db-ping")
    assert r.status_code == 200
    body = r.json()
    assert body["db"] == "ok"
    assert body["value"] == 1

# 존재하지 않는 경로도 {"error": ...} 형식으로 응답
def test_unknown_route_uses_error_body(client):
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}

# 여러 번 호출해도 root 로거 핸들러는 하나, 레벨은 마지막 호출 기준
def test_configure_logging_installs_single_handler():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        app_logging.configure_logging("info")
        app_logging.configure_logging("DEBUG")

        installed = [h for h in root.handlers if h is app_logging._handler]
        assert len(installed) == 1
        assert installed[0].formatter._fmt == app_logging.LOG_FORMAT
        assert root.level == logging.DEBUG
    finally:
        for handler in root.handlers[:]:
            if handler not in before:
                root.removeHandler(handler)
        root.setLevel(level)
