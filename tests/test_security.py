from __future__ import annotations

import json

import pytest

from fitcoach_api.app.core.errors import PermissionDenied
from fitcoach_api.app.core.security import (
    Principal,
    _b64_url_encode,
    _sign,
    create_access_token,
    decode_access_token,
    hash_password,
    require_roles,
    verify_password,
)

CLAIMS = {"userId": "1", "email": "coach@fitcoachpro.com", "role": "coach", "name": "John Coach"}


def test_password_hashing_roundtrip():
    hashed = hash_password("coach123")
    assert "$" in hashed
    assert verify_password("coach123", hashed)
    assert not verify_password("coach124", hashed)


def test_password_hashes_are_salted():
    assert hash_password("same-password") != hash_password("same-password")


def test_verify_password_with_malformed_hash():
    assert verify_password("coach123", "not-a-hash") is False
    assert verify_password("coach123", "zz$zz") is False


def test_token_roundtrip():
    token = create_access_token(CLAIMS, secret_key="s3cret", expires_delta=60)
    payload = decode_access_token(token, secret_key="s3cret")
    assert payload is not None
    assert {k: payload[k] for k in CLAIMS} == CLAIMS
    assert payload["exp"] > 0


@pytest.mark.parametrize("token", ["", "abc", "a.b.c", "a.b"])
def test_malformed_tokens_are_rejected(token):
    assert decode_access_token(token, secret_key="s3cret") is None


def test_token_rejected_with_wrong_secret_or_after_expiry():
    token = create_access_token(CLAIMS, secret_key="s3cret", expires_delta=60)
    assert decode_access_token(token, secret_key="other") is None
    expired = create_access_token(CLAIMS, secret_key="s3cret", expires_delta=-1)
    assert decode_access_token(expired, secret_key="s3cret") is None


def test_principal_claims():
    principal = Principal(user_id="7", email="x@example.com", role="admin", name="X")
    assert principal.claims() == {"userId": "7", "email": "x@example.com", "role": "admin", "name": "X"}


def test_require_roles():
    check = require_roles("coach", "admin")
    coach = Principal(user_id="1", email="c@example.com", role="COACH", name="C")
    assert check(current_user=coach) is coach
    with pytest.raises(PermissionDenied):
        check(current_user=Principal(user_id="2", email="g@example.com", role="guest", name="G"))


def _signed(payload, secret="s3cret"):
    header_b64 = _b64_url_encode(json.dumps({"alg": "HS256", "typ": "JWT"}).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(payload).encode("utf-8"))
    signature = _sign(f"{header_b64}.{payload_b64}".encode("utf-8"), secret)
    return f"{header_b64}.{payload_b64}.{_b64_url_encode(signature)}"


def test_hand_signed_token_is_accepted():
    payload = decode_access_token(_signed({**CLAIMS, "exp": 4102444800}), secret_key="s3cret")
    assert payload is not None and payload["userId"] == "1"


@pytest.mark.parametrize("exp", ["soon", None, [1], {"at": 1}])
def test_signed_token_with_unusable_exp_is_rejected(exp):
    assert decode_access_token(_signed({**CLAIMS, "exp": exp}), secret_key="s3cret") is None


def test_signed_non_object_payload_is_rejected():
    assert decode_access_token(_signed([1, 2, 3]), secret_key="s3cret") is None
