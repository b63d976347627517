import httpx
import pytest
import structlog
from fastapi import FastAPI
from starlette.requests import Request

from core.middleware import RequestLoggingMiddleware, learner_id_from


def make_request(path, query_string=b""):
    return Request({
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("test", 80),
        "path": path,
        "query_string": query_string,
        "headers": [],
    })


@pytest.mark.parametrize("path, query, expected", [
    ("/api/study/learners/7", b"", "7"),
    ("/api/study/learners/7/", b"", "7"),
    ("/api/study/challenges", b"user_id=3&limit=2", "3"),
    ("/api/study/records/12", b"", None),
    ("/api/study/learners/abc", b"", None),
])
def test_learner_id_from(path, query, expected):
    assert learner_id_from(make_request(path, query)) == expected


@pytest.fixture
async def context_client():
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/api/study/learners/{user_id}")
    async def bound_context(user_id: int):
        return structlog.contextvars.get_contextvars()

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def test_learner_path_binds_user_id(context_client):
    response = await context_client.get("/api/study/learners/42", headers={"X-Correlation-ID": "abc123"})

    context = response.json()
    assert context["user_id"] == "42"
    assert context["correlation_id"] == "abc123"
    assert response.headers["X-Correlation-ID"] == "abc123"
