"""
Tests for utility modules: datetime helpers, validation, security and config.
"""

import uuid
from datetime import date, datetime, timedelta, timezone

import pytest

from vetmarket.exceptions import AuthenticationException, TokenExpiredException
from vetmarket.utils.config import (
    AppSettings,
    ConfigError,
    DatabaseURLValidator,
    EnvironmentConfig,
)
from vetmarket.utils.datetime_utils import (
    UTC,
    ensure_utc,
    get_current_utc,
    is_valid_time_string,
    minutes_since,
    parse_iso_datetime,
    schedule_day_index,
    time_to_minutes,
)
from vetmarket.utils.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from vetmarket.utils.validation import (
    parse_csv_list,
    sanitize_string,
    validate_email,
    validate_zip_code,
)


class TestDatetimeUtils:
    """Test cases for datetime utilities."""

    def test_get_current_utc_is_aware(self):
        assert get_current_utc().tzinfo is not None

    def test_ensure_utc(self):
        naive = datetime(2024, 1, 1, 12, 0)
        assert ensure_utc(naive) == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

        offset = datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert ensure_utc(offset).hour == 10
        assert ensure_utc(None) is None

    @pytest.mark.parametrize(
        "value,valid",
        [("00:00", True), ("9:30", True), ("23:59", True), ("24:00", False), ("12:60", False), (930, False)],
    )
    def test_is_valid_time_string(self, value, valid):
        assert is_valid_time_string(value) is valid

    def test_time_to_minutes(self):
        assert time_to_minutes("00:00") == 0
        assert time_to_minutes("09:30") == 570
        with pytest.raises(ValueError):
            time_to_minutes("25:00")

    def test_schedule_day_index_starts_on_sunday(self):
        assert schedule_day_index(date(2024, 6, 9)) == 0  # Sunday
        assert schedule_day_index(date(2024, 6, 10)) == 1  # Monday
        assert schedule_day_index(date(2024, 6, 15)) == 6  # Saturday

    def test_parse_iso_datetime(self):
        parsed = parse_iso_datetime("2024-06-05T10:30:00Z")
        assert parsed == datetime(2024, 6, 5, 10, 30, tzinfo=UTC)

        assert parse_iso_datetime("2024-06-05").date() == date(2024, 6, 5)

    def test_parse_iso_datetime_keeps_wall_clock(self):
        parsed = parse_iso_datetime("2024-06-05T10:30:00-06:00", to_utc=False)
        assert parsed.hour == 10

    @pytest.mark.parametrize("value", ["", "tomorrow", "2024-13-01", None])
    def test_parse_iso_datetime_rejects_garbage(self, value):
        with pytest.raises(ValueError):
            parse_iso_datetime(value)

    def test_minutes_since(self):
        now = get_current_utc()
        assert minutes_since(now - timedelta(minutes=90), now) == pytest.approx(90)
        assert minutes_since(None) == 0.0


class TestValidationUtils:
    def test_sanitize_string(self):
        assert sanitize_string("  hello   world  ") == "hello world"
        assert sanitize_string("abcdef", max_length=3) == "abc"

    def test_validate_email(self):
        result = validate_email("  Vet@Example.COM ")
        assert result.is_valid
        assert result.value == "vet@example.com"

    @pytest.mark.parametrize("email", ["", "not-an-email", "a@b"])
    def test_validate_email_invalid(self, email):
        assert not validate_email(email).is_valid

    def test_validate_zip_code(self):
        assert validate_zip_code("80202").is_valid
        assert validate_zip_code("80202-1234").is_valid
        result = validate_zip_code("8020")
        assert not result.is_valid
        assert result.errors[0].message == "Invalid ZIP code"

    def test_parse_csv_list(self):
        assert parse_csv_list("Small Animal, Equine,,") == ["Small Animal", "Equine"]
        assert parse_csv_list(None) == []


class TestSecurityUtils:
    def test_password_hash_roundtrip(self):
        hashed = hash_password("s3cret!")

        assert hashed != "s3cret!"
        assert verify_password("s3cret!", hashed)
        assert not verify_password("wrong", hashed)
        assert not verify_password("anything", "")

    def test_token_carries_user_id(self):
        user_id = uuid.uuid4()
        token = create_access_token(user_id, "secret", extra_claims={"role": "Admin"})

        assert decode_access_token(token, "secret") == user_id

    def test_expired_token(self):
        token = create_access_token(
            uuid.uuid4(),
            "secret",
            expires_minutes=5,
            now=get_current_utc() - timedelta(hours=1),
        )
        with pytest.raises(TokenExpiredException):
            decode_access_token(token, "secret")

    def test_wrong_secret(self):
        token = create_access_token(uuid.uuid4(), "secret")
        with pytest.raises(AuthenticationException, match="token failed"):
            decode_access_token(token, "other-secret")

    def test_garbage_token(self):
        with pytest.raises(AuthenticationException):
            decode_access_token("not.a.token", "secret")


class TestConfig:
    def test_environment_config_types(self, monkeypatch):
        monkeypatch.setenv("VM_INT", "42")
        monkeypatch.setenv("VM_BOOL", "yes")
        monkeypatch.setenv("VM_LIST", "a, b,,c")

        assert EnvironmentConfig.get_int("VM_INT") == 42
        assert EnvironmentConfig.get_bool("VM_BOOL") is True
        assert EnvironmentConfig.get_list("VM_LIST") == ["a", "b", "c"]
        assert EnvironmentConfig.get_str("VM_MISSING", "fallback") == "fallback"

    def test_invalid_int(self, monkeypatch):
        monkeypatch.setenv("VM_INT", "forty-two")
        with pytest.raises(ConfigError):
            EnvironmentConfig.get_int("VM_INT")

    def test_required_missing(self, monkeypatch):
        monkeypatch.delenv("VM_REQUIRED", raising=False)
        with pytest.raises(ConfigError):
            EnvironmentConfig.get_str("VM_REQUIRED", required=True)

    @pytest.mark.parametrize(
        "url",
        [
            "postgresql+asyncpg://user:pw@localhost:5432/vetmarket",
            "sqlite+aiosqlite:///./test.db",
        ],
    )
    def test_database_url_validator_accepts(self, url):
        assert DatabaseURLValidator.validate_url(url)["valid"] is True

    @pytest.mark.parametrize(
        "url", ["", "mysql://localhost/db", "postgresql://localhost", "localhost/db"]
    )
    def test_database_url_validator_rejects(self, url):
        with pytest.raises(ConfigError):
            DatabaseURLValidator.validate_url(url)

    def test_settings_from_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./env.db")
        monkeypatch.setenv("JWT_SECRET", "env-secret")
        monkeypatch.setenv("SESSION_TIMEOUT_ENFORCED", "false")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("CORS_ORIGINS", "https://app.example.com,https://admin.example.com")

        settings = AppSettings.from_environment()

        assert settings.database_url == "sqlite+aiosqlite:///./env.db"
        assert settings.jwt_secret == "env-secret"
        assert settings.session_timeout_enforced is False
        assert settings.log_level == "DEBUG"
        assert settings.cors_origins == ["https://app.example.com", "https://admin.example.com"]

    def test_production_requires_secret(self):
        with pytest.raises(ConfigError, match="JWT_SECRET"):
            AppSettings(environment="production")
