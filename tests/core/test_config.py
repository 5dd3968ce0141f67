"""Tests for application configuration."""
import pytest
from pydantic import ValidationError

from core.config import Settings

VALID_SECRET = "x" * 32


def _settings(**kwargs: object) -> Settings:
    return Settings(
        _env_file=None,
        database_url="postgresql+asyncpg://test",
        JWT_SECRET=kwargs.pop("JWT_SECRET", VALID_SECRET),
        **kwargs,
    )


class TestJwtSettings:
    """Tests for session token configuration."""

    def test__defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """HS256 and a 15 minute lifetime by default."""
        monkeypatch.delenv("JWT_ALGORITHM", raising=False)
        monkeypatch.delenv("ACCESS_TOKEN_EXPIRE_MINUTES", raising=False)
        settings = _settings()
        assert settings.jwt_algorithm == "HS256"
        assert settings.access_token_expire_minutes == 15

    def test__secret_too_short_rejected(self) -> None:
        """A secret under 32 characters fails validation."""
        with pytest.raises(ValidationError, match="at least 32 characters"):
            _settings(JWT_SECRET="short")

    def test__secret_required(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings cannot be built without a secret."""
        monkeypatch.delenv("JWT_SECRET", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, database_url="postgresql+asyncpg://test")

    def test__algorithm_normalized(self) -> None:
        """Algorithm names are case-insensitive."""
        assert _settings(JWT_ALGORITHM="hs512").jwt_algorithm == "HS512"

    @pytest.mark.parametrize("algorithm", ["RS256", "none", "ES256"])
    def test__non_hmac_algorithm_rejected(self, algorithm: str) -> None:
        """Only HMAC algorithms work with a shared secret."""
        with pytest.raises(ValidationError, match="Unsupported JWT_ALGORITHM"):
            _settings(JWT_ALGORITHM=algorithm)

    def test__expiry_must_be_positive(self) -> None:
        """Zero-minute tokens are rejected."""
        with pytest.raises(ValidationError):
            _settings(ACCESS_TOKEN_EXPIRE_MINUTES="0")

    def test__settings_are_immutable(self) -> None:
        """The secret cannot be swapped at runtime."""
        settings = _settings()
        with pytest.raises(ValidationError):
            settings.jwt_secret_key = "y" * 32


class TestCorsOriginsParsing:
    """Tests for CORS origins parsing from environment variables."""

    def test_parse_multiple_origins_with_whitespace(self) -> None:
        """Comma-separated origins are split and stripped."""
        settings = _settings(CORS_ORIGINS="  http://localhost:5173 , https://example.com  ")
        assert settings.cors_origins == [
            "http://localhost:5173",
            "https://example.com",
        ]

    def test_parse_empty_string(self) -> None:
        """Empty string results in empty list."""
        assert _settings(CORS_ORIGINS="").cors_origins == []

    def test_parse_trailing_comma(self) -> None:
        """Trailing comma is handled (empty entries filtered)."""
        assert _settings(CORS_ORIGINS="http://localhost:5173,").cors_origins == [
            "http://localhost:5173",
        ]


def test__log_level_uppercased() -> None:
    """Lowercase log levels are accepted."""
    assert _settings(LOG_LEVEL="debug").log_level == "DEBUG"
