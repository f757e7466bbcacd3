"""
tests.test_jwt

Token validator behaviour: every failure maps to exactly one auth error, and
the validator fails closed on anything it did not sign itself.
"""

from __future__ import annotations

import base64
import json
from datetime import UTC, datetime, timedelta

import jwt as pyjwt
import pytest

from conftest import OTHER_SECRET, TEST_SECRET
from microtodo.auth.errors import Expired, InvalidSignature, MalformedToken, MissingToken
from microtodo.auth.jwt import JwtConfig, TokenValidator, issue_token, peek_expiry
from microtodo.auth.models import Principal

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=UTC)


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _unb64(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


@pytest.fixture
def validator(jwt_cfg: JwtConfig) -> TokenValidator:
    return TokenValidator(jwt_cfg, clock=lambda: NOW)


def test_issued_token_round_trips_to_principal(jwt_cfg, validator) -> None:
    token = issue_token(cfg=jwt_cfg, user_id=7, username="alice", now=NOW)

    assert validator.validate(f"Bearer {token}") == Principal(user_id=7, username="alice")


def test_issued_claims_follow_wire_format(jwt_cfg) -> None:
    token = issue_token(cfg=jwt_cfg, user_id=7, username="alice", now=NOW)

    header = json.loads(_unb64(token.split(".")[0]))
    claims = json.loads(_unb64(token.split(".")[1]))
    assert header["alg"] == "HS256"
    assert claims == {
        "sub": "alice",
        "userId": 7,
        "iat": int(NOW.timestamp()),
        "exp": int(NOW.timestamp()) + 3600,
    }


@pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer ", "Basic abc", "bearer abc"])
def test_missing_or_non_bearer_header(validator, header) -> None:
    with pytest.raises(MissingToken):
        validator.validate(header)


@pytest.mark.parametrize(
    "token",
    ["abc", "a.b", "a.b.c.d", "a..c", "a.b.", "###.$$$.%%%", "eyJhbGciOiJIUzI1NiJ9.e30.x y"],
)
def test_structurally_malformed_tokens(validator, token) -> None:
    with pytest.raises(MalformedToken):
        validator.decode(token)


def test_undecodable_header_is_malformed(jwt_cfg, validator) -> None:
    token = issue_token(cfg=jwt_cfg, user_id=1, username="alice", now=NOW)
    _, payload, sig = token.split(".")

    with pytest.raises(MalformedToken):
        validator.decode(f"{_b64(b'not json')}.{payload}.{sig}")


def test_token_signed_with_another_key_is_rejected(validator) -> None:
    other = JwtConfig(alg="HS256", secret=OTHER_SECRET)
    token = issue_token(cfg=other, user_id=1, username="alice", now=NOW)

    with pytest.raises(InvalidSignature):
        validator.decode(token)


def test_every_single_bit_flip_in_payload_is_rejected(jwt_cfg, validator) -> None:
    token = issue_token(cfg=jwt_cfg, user_id=1, username="alice", now=NOW)
    header, payload, sig = token.split(".")
    raw = _unb64(payload)

    for index in range(len(raw)):
        for bit in range(8):
            flipped = bytearray(raw)
            flipped[index] ^= 1 << bit
            tampered = f"{header}.{_b64(bytes(flipped))}.{sig}"
            with pytest.raises(InvalidSignature):
                validator.decode(tampered)


def test_forged_user_id_is_rejected(jwt_cfg, validator) -> None:
    token = issue_token(cfg=jwt_cfg, user_id=1, username="alice", now=NOW)
    header, payload, sig = token.split(".")
    claims = json.loads(_unb64(payload))
    claims["userId"] = 2
    forged = f"{header}.{_b64(json.dumps(claims).encode())}.{sig}"

    with pytest.raises(InvalidSignature):
        validator.decode(forged)


def test_alg_none_is_rejected(validator) -> None:
    claims = {"sub": "alice", "userId": 1, "iat": int(NOW.timestamp()), "exp": int(NOW.timestamp()) + 60}
    header = _b64(json.dumps({"alg": "none", "typ": "JWT"}).encode())
    unsigned = f"{header}.{_b64(json.dumps(claims).encode())}"

    # Empty signature segment: not even a well-formed JWS.
    with pytest.raises(MalformedToken):
        validator.decode(unsigned + ".")
    # Any signature bytes with alg=none: refused, never accepted by default.
    with pytest.raises(InvalidSignature):
        validator.decode(unsigned + "." + _b64(b"junk"))


def test_unexpected_algorithm_is_rejected(validator) -> None:
    hs512 = JwtConfig(alg="HS512", secret=TEST_SECRET)
    token = issue_token(cfg=hs512, user_id=1, username="alice", now=NOW)

    with pytest.raises(InvalidSignature):
        validator.decode(token)


def test_expired_five_minutes_ago(jwt_cfg, validator) -> None:
    token = issue_token(
        cfg=jwt_cfg,
        user_id=1,
        username="alice",
        now=NOW - timedelta(hours=1, minutes=5),
        ttl=timedelta(hours=1),
    )

    with pytest.raises(Expired):
        validator.decode(token)


def test_expiry_boundary_respects_leeway(jwt_cfg) -> None:
    token = issue_token(cfg=jwt_cfg, user_id=1, username="alice", now=NOW, ttl=timedelta(seconds=60))
    exp = NOW + timedelta(seconds=60)

    strict = JwtConfig(alg="HS256", secret=TEST_SECRET, leeway_seconds=0)
    assert TokenValidator(strict, clock=lambda: exp - timedelta(seconds=1)).decode(token).user_id == 1
    with pytest.raises(Expired):
        TokenValidator(strict, clock=lambda: exp).decode(token)

    # Default 5s skew: still accepted 4s past exp, rejected at 5s.
    assert TokenValidator(jwt_cfg, clock=lambda: exp + timedelta(seconds=4)).decode(token)
    with pytest.raises(Expired):
        TokenValidator(jwt_cfg, clock=lambda: exp + timedelta(seconds=5)).decode(token)


@pytest.mark.parametrize("missing", ["sub", "userId", "iat", "exp"])
def test_signed_token_without_required_claim_is_malformed(validator, missing) -> None:
    claims = {"sub": "alice", "userId": 1, "iat": int(NOW.timestamp()), "exp": int(NOW.timestamp()) + 60}
    del claims[missing]
    token = pyjwt.encode(claims, TEST_SECRET, algorithm="HS256")

    with pytest.raises(MalformedToken):
        validator.decode(token)


@pytest.mark.parametrize("user_id", ["1", True, 1.5, None])
def test_non_integer_user_id_is_malformed(validator, user_id) -> None:
    claims = {"sub": "alice", "userId": user_id, "iat": int(NOW.timestamp()), "exp": int(NOW.timestamp()) + 60}
    token = pyjwt.encode(claims, TEST_SECRET, algorithm="HS256")

    with pytest.raises(MalformedToken):
        validator.decode(token)


def test_validator_holds_no_state_between_calls(jwt_cfg, validator) -> None:
    alice = issue_token(cfg=jwt_cfg, user_id=1, username="alice", now=NOW)
    bob = issue_token(cfg=jwt_cfg, user_id=2, username="bob", now=NOW)

    results = [validator.decode(t) for t in (alice, bob, alice)]

    assert [p.user_id for p in results] == [1, 2, 1]


def test_peek_expiry_reads_exp_without_the_key(jwt_cfg) -> None:
    token = issue_token(cfg=jwt_cfg, user_id=1, username="alice", now=NOW)

    assert peek_expiry(token) == NOW + timedelta(seconds=3600)
    assert peek_expiry("not-a-token") is None


@pytest.mark.parametrize("exp", [10**20, -(10**20)])
def test_peek_expiry_out_of_range_exp_is_none(exp: int) -> None:
    token = pyjwt.encode({"sub": "alice", "exp": exp}, TEST_SECRET, algorithm="HS256")

    assert peek_expiry(token) is None
