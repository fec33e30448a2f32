import pytest
from fastapi import HTTPException

from pdf_rag_server.auth.security import verify_client_jwt, require_scopes
from pdf_rag_server.auth.models import UserContext

from conftest import create_valid_token


class MockCredentials:
    def __init__(self, token):
        self.credentials = token


def test_valid_jwt_accepted():
    token = create_valid_token()
    user_context = verify_client_jwt(MockCredentials(token))

    assert user_context.username == "TestUser"
    assert "documents" in user_context.scopes
    assert user_context.client_id == "chat-frontend"


def test_expired_jwt_rejected():
    token = create_valid_token(expired=True)
    with pytest.raises(HTTPException) as exc:
        verify_client_jwt(MockCredentials(token))
    assert exc.value.status_code == 401
    assert "expired" in exc.value.detail


def test_invalid_issuer_rejected():
    token = create_valid_token(issuer="SomeoneElse")
    with pytest.raises(HTTPException) as exc:
        verify_client_jwt(MockCredentials(token))
    assert exc.value.status_code == 401
    assert "issuer" in exc.value.detail


def test_invalid_audience_rejected():
    token = create_valid_token(audience="wrong-audience")
    with pytest.raises(HTTPException) as exc:
        verify_client_jwt(MockCredentials(token))
    assert exc.value.status_code == 401
    assert "audience" in exc.value.detail


def test_wrong_signature_rejected():
    token = create_valid_token(secret="another-secret-that-is-also-32-chars-long")
    with pytest.raises(HTTPException) as exc:
        verify_client_jwt(MockCredentials(token))
    assert exc.value.status_code == 401


def test_scope_enforcement():
    check = require_scopes("documents")
    user = UserContext(username="u", scopes=["documents"], client_id="c")
    assert check(user) is user

    with pytest.raises(HTTPException) as exc:
        check(UserContext(username="u", scopes=["chat"], client_id="c"))
    assert exc.value.status_code == 403
