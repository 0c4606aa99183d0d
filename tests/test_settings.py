import pytest
from managed_http.settings import DEFAULT_TIMEOUT_SECONDS, Settings


# Fixture to provide a Settings instance for each test
@pytest.fixture
def settings():
    return Settings()


@pytest.mark.parametrize(
    "env_var, method_name, test_value, expected_value",
    [
        # Env Var Name, Settings Method Name, Value to Set, Expected Return
        ("MANAGED_HTTP_BASE_URL", "get_base_url", "https://example.com/api", "https://example.com/api"),
        ("MANAGED_HTTP_TIMEOUT_SECONDS", "get_timeout_seconds", "30", 30.0),
        ("MANAGED_HTTP_TIMEOUT_SECONDS", "get_timeout_seconds", "2.5", 2.5),
        ("LOG_LEVEL", "get_log_level", "debug", "DEBUG"),  # Should be uppercase
    ],
)
def test_getter_set(settings, monkeypatch, env_var, method_name, test_value, expected_value):
    """Test getters when the corresponding environment variable is set."""
    monkeypatch.setenv(env_var, test_value)
    getter_method = getattr(settings, method_name)
    assert getter_method() == expected_value


@pytest.mark.parametrize(
    "env_var, method_name, expected_default",
    [
        ("MANAGED_HTTP_BASE_URL", "get_base_url", None),
        ("MANAGED_HTTP_TIMEOUT_SECONDS", "get_timeout_seconds", float(DEFAULT_TIMEOUT_SECONDS)),
        ("LOG_LEVEL", "get_log_level", "INFO"),
    ],
)
def test_getter_defaults(settings, monkeypatch, env_var, method_name, expected_default):
    """Test getters return correct default values when env vars are not set."""
    monkeypatch.delenv(env_var, raising=False)
    getter_method = getattr(settings, method_name)
    assert getter_method() == expected_default


def test_default_timeout_is_five_minutes():
    assert DEFAULT_TIMEOUT_SECONDS == 300


def test_get_log_level_custom_default(settings, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    assert settings.get_log_level("warning") == "WARNING"


# --- Specific Error Condition Tests ---


def test_get_base_url_invalid_format(settings, monkeypatch):
    """Test get_base_url when MANAGED_HTTP_BASE_URL has an invalid format."""
    monkeypatch.setenv("MANAGED_HTTP_BASE_URL", "not-a-valid-url")
    with pytest.raises(ValueError, match="Invalid MANAGED_HTTP_BASE_URL format"):
        settings.get_base_url()


@pytest.mark.parametrize("raw", ["soon", "0", "-5"])
def test_get_timeout_seconds_invalid(settings, monkeypatch, raw):
    monkeypatch.setenv("MANAGED_HTTP_TIMEOUT_SECONDS", raw)
    with pytest.raises(ValueError, match="MANAGED_HTTP_TIMEOUT_SECONDS"):
        settings.get_timeout_seconds()
