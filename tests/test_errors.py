from fastapi.testclient import TestClient
from app.main import app
import pytest

client = TestClient(app)

def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert "error" in data
    assert data["code"] == "HTTP_ERROR"

def test_validation_error_structure():
    from app.schemas.otp import OtpSendRequest

    @app.post("/test-validation")
    def echo(body: OtpSendRequest):
        return {"phoneNumber": body.phone_number}

    response = client.post("/test-validation", json={})
    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["error"] == "Input validation failed"
    assert data["details"][0]["loc"] == ["body", "phoneNumber"]

@pytest.mark.parametrize("exc_name, status, code", [
    ("UserAlreadyExistsError", 409, "USER_ALREADY_EXISTS"),
    ("InvalidOtpError", 400, "INVALID_OTP"),
    ("NoChallengeFoundError", 400, "NO_CHALLENGE_FOUND"),
    ("UserNotFoundError", 404, "USER_NOT_FOUND"),
])
def test_app_errors_render_with_status(exc_name, status, code):
    from app.core import exceptions

    path = f"/test-error/{exc_name}"

    @app.get(path)
    def trigger():
        raise getattr(exceptions, exc_name)()

    response = client.get(path)
    assert response.status_code == status
    data = response.json()
    assert data["code"] == code
    assert data["error"]

def test_custom_exception_message():
    from app.core.exceptions import ResourceNotFoundError

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise ResourceNotFoundError(message="Expense not found")

    response = client.get("/test-custom-error")
    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "NOT_FOUND"
    assert data["error"] == "Expense not found"

def test_liveness():
    assert client.get("/live").json() == {"status": "alive"}
