from typing import Annotated

from fastapi import FastAPI, Header
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from group_ledger.api.error_handlers import register_error_handlers
from group_ledger.domain.errors import EmptyGroupError, UnknownPayerError


def test_domain_error_handler_returns_contract_shape() -> None:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/boom")
    def boom() -> None:
        raise EmptyGroupError(message="Group has no members")

    client = TestClient(app)
    response = client.get("/boom")

    assert response.status_code == 422
    assert response.json() == {
        "code": "EMPTY_GROUP",
        "message": "Group has no members",
    }


def test_domain_error_handler_includes_offending_record_ids() -> None:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/boom")
    def boom() -> None:
        raise UnknownPayerError(["exp-9"])

    response = TestClient(app).get("/boom")

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "UNKNOWN_PAYER"
    assert body["details"] == {"expense_ids": ["exp-9"]}


def test_validation_error_lists_failing_fields() -> None:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/needs-header")
    def needs_header(x_user_id: Annotated[str, Header()]) -> None:
        return None

    response = TestClient(app).get("/needs-header")

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "INVALID_REQUEST"
    assert body["details"]["errors"][0]["field"] == "header.x-user-id"


def test_storage_failure_maps_to_service_unavailable() -> None:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/boom")
    def boom() -> None:
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    response = TestClient(app, raise_server_exceptions=False).get("/boom")

    assert response.status_code == 503
    assert response.json()["code"] == "STORAGE_UNAVAILABLE"
    assert "details" not in response.json()
