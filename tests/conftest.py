import os

# Settings are read at import time; configure before the app is imported.
os.environ.setdefault("JWT_CLIENT_SECRET", "test-secret-client-to-server-must-be-32-chars")
os.environ.setdefault("OPENAI_API_KEY", "sk-test")

import time

import jwt
import pytest

from pdf_rag_server.config import settings
from pdf_rag_server.documents.models import Chunk
from pdf_rag_server.documents.store import DocumentStore


def create_valid_token(
    issuer=None,
    audience=None,
    user="TestUser",
    scopes=None,
    expired=False,
    secret=None,
):
    if scopes is None:
        scopes = ["documents"]
    if secret is None:
        secret = settings.jwt_client_secret.get_secret_value()

    now = int(time.time())
    iat = now - 3600 if expired else now
    exp = iat - 10 if expired else now + 30

    payload = {
        "iss": issuer or settings.jwt_issuer,
        "aud": audience or settings.jwt_audience,
        "iat": iat,
        "exp": exp,
        "user": user,
        "scope": scopes,
        "client_id": "chat-frontend",
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def store():
    return DocumentStore()


@pytest.fixture
def doc1(store):
    """The two-chunk document used across retrieval tests."""
    return store.store_document(
        "doc1",
        "doc1.pdf",
        [
            Chunk(id="a", text="a", embedding=[1.0, 0.0]),
            Chunk(id="b", text="b", embedding=[0.0, 1.0]),
        ],
    )
