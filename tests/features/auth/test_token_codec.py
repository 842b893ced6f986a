"""Tests for token issuing and validation."""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from studies_api.features.auth.exceptions import (
    TokenExpiredError,
    TokenMalformedError,
    TokenSignatureInvalidError,
)
from studies_api.features.auth.token_codec import TokenCodec, TokenConfig, TokenKind
from studies_api.features.user.models import UserRole

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
SECRET = "codec-test-secret-0123456789abcdef"


@pytest.fixture
def config() -> TokenConfig:
    return TokenConfig(
        secret_key=SECRET,
        algorithm="HS256",
        access_ttl=timedelta(minutes=30),
        refresh_ttl=timedelta(days=7),
    )


@pytest.fixture
def token_codec(config) -> TokenCodec:
    return TokenCodec(config)


class TestTokenConfig:
    def test_rejects_empty_secret(self):
        with pytest.raises(ValueError):
            TokenConfig(secret_key="", algorithm="HS256", access_ttl=timedelta(minutes=1), refresh_ttl=timedelta(days=1))

    def test_rejects_access_ttl_not_shorter_than_refresh(self):
        with pytest.raises(ValueError):
            TokenConfig(
                secret_key=SECRET,
                algorithm="HS256",
                access_ttl=timedelta(days=1),
                refresh_ttl=timedelta(days=1),
            )


class TestIssue:
    def test_access_token_shape(self, token_codec):
        issued = token_codec.issue(1, UserRole.OWNER, TokenKind.ACCESS, NOW)

        assert len(issued.token) == 237
        assert issued.token.count(".") == 2
        assert issued.expires_at == NOW + timedelta(minutes=30)

    def test_refresh_token_shape(self, token_codec):
        issued = token_codec.issue(1, UserRole.OWNER, TokenKind.REFRESH, NOW)

        assert len(issued.token) == 239
        assert issued.expires_at == NOW + timedelta(days=7)

    def test_claims(self, token_codec):
        issued = token_codec.issue(42, UserRole.RESIDENT, TokenKind.ACCESS, NOW)
        payload = jwt.decode(issued.token, SECRET, algorithms=["HS256"], options={"verify_exp": False})

        assert payload["sub"] == "42"
        assert payload["role"] == "resident"
        assert payload["type"] == "access"
        assert payload["iat"] == int(NOW.timestamp())
        assert payload["exp"] == int((NOW + timedelta(minutes=30)).timestamp())
        assert len(payload["jti"]) == 32

    def test_tokens_issued_in_same_second_differ(self, token_codec):
        first = token_codec.issue(1, UserRole.OWNER, TokenKind.REFRESH, NOW)
        second = token_codec.issue(1, UserRole.OWNER, TokenKind.REFRESH, NOW)

        assert first.token != second.token

    def test_sub_second_part_of_now_is_dropped(self, token_codec):
        issued = token_codec.issue(1, UserRole.OWNER, TokenKind.ACCESS, NOW + timedelta(milliseconds=700))
        assert issued.expires_at == NOW + timedelta(minutes=30)


class TestValidate:
    def test_round_trip(self, token_codec):
        issued = token_codec.issue(7, UserRole.OWNER, TokenKind.REFRESH, NOW)
        claims = token_codec.validate(issued.token, NOW)

        assert claims.subject == 7
        assert claims.role is UserRole.OWNER
        assert claims.kind is TokenKind.REFRESH
        assert claims.issued_at == NOW
        assert claims.expires_at == issued.expires_at

    def test_valid_one_second_before_expiry(self, token_codec):
        issued = token_codec.issue(1, UserRole.OWNER, TokenKind.ACCESS, NOW)
        token_codec.validate(issued.token, issued.expires_at - timedelta(seconds=1))

    def test_expired_at_exact_expiry(self, token_codec):
        issued = token_codec.issue(1, UserRole.OWNER, TokenKind.ACCESS, NOW)

        with pytest.raises(TokenExpiredError):
            token_codec.validate(issued.token, issued.expires_at)

    def test_expiry_check_can_be_skipped(self, token_codec):
        issued = token_codec.issue(1, UserRole.OWNER, TokenKind.REFRESH, NOW)
        claims = token_codec.validate(issued.token, NOW + timedelta(days=30), verify_expiry=False)
        assert claims.subject == 1

    def test_wrong_secret(self, token_codec, config):
        other = TokenCodec(
            TokenConfig(
                secret_key="another-secret-0123456789abcdef0123",
                algorithm=config.algorithm,
                access_ttl=config.access_ttl,
                refresh_ttl=config.refresh_ttl,
            )
        )
        issued = other.issue(1, UserRole.OWNER, TokenKind.ACCESS, NOW)

        with pytest.raises(TokenSignatureInvalidError):
            token_codec.validate(issued.token, NOW)

    def test_swapped_payload(self, token_codec):
        mine = token_codec.issue(1, UserRole.RESIDENT, TokenKind.ACCESS, NOW).token
        theirs = token_codec.issue(2, UserRole.OWNER, TokenKind.ACCESS, NOW).token

        header, _, signature = mine.split(".")
        forged = ".".join([header, theirs.split(".")[1], signature])

        with pytest.raises(TokenSignatureInvalidError):
            token_codec.validate(forged, NOW)

    @pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c"])
    def test_garbage(self, token_codec, token):
        with pytest.raises(TokenMalformedError):
            token_codec.validate(token, NOW)

    def test_missing_claims(self, token_codec):
        token = jwt.encode({"sub": "1", "exp": int(NOW.timestamp()) + 60}, SECRET, algorithm="HS256")

        with pytest.raises(TokenMalformedError):
            token_codec.validate(token, NOW)

    def test_unknown_role(self, token_codec):
        payload = {
            "sub": "1",
            "role": "admin",
            "type": "access",
            "jti": "0" * 32,
            "iat": int(NOW.timestamp()),
            "exp": int(NOW.timestamp()) + 60,
        }
        token = jwt.encode(payload, SECRET, algorithm="HS256")

        with pytest.raises(TokenMalformedError):
            token_codec.validate(token, NOW)

    def test_wrong_kind(self, token_codec):
        issued = token_codec.issue(1, UserRole.OWNER, TokenKind.REFRESH, NOW)

        with pytest.raises(TokenMalformedError):
            token_codec.validate(issued.token, NOW, kind=TokenKind.ACCESS)

    def test_other_algorithm_rejected(self, token_codec):
        issued = jwt.encode(
            {"sub": "1", "role": "owner", "type": "access", "jti": "0" * 32, "iat": 0, "exp": 2**31 - 1},
            SECRET,
            algorithm="HS512",
        )

        with pytest.raises(TokenMalformedError):
            token_codec.validate(issued, NOW)
