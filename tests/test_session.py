import base64
import json

from domain.session import Session, decode_claims


def make_token(claims: dict) -> str:
    payload = base64.urlsafe_b64encode(json.dumps(claims).encode()).rstrip(b"=")
    return f"header.{payload.decode()}.signature"


def test_session_from_token_reads_claims() -> None:
    token = make_token(
        {"sub": "u1", "username": "alice", "email": "a@example.com", "isPremium": True}
    )
    session = Session.from_token(token)
    assert session.bearer_token == token
    assert session.is_authenticated
    assert session.user is not None
    assert session.user.id == "u1"
    assert session.user.is_premium


def test_opaque_token_has_no_user() -> None:
    session = Session.from_token("opaque")
    assert session.bearer_token == "opaque"
    assert session.user is None


def test_garbage_payload() -> None:
    assert decode_claims("a.!!!.c") is None


def test_empty_token() -> None:
    session = Session.from_token(None)
    assert not session.is_authenticated
    assert session.bearer_token is None


def test_logout() -> None:
    session = Session.from_token("tok")
    session.logout()
    assert not session.is_authenticated
    assert session.user is None
