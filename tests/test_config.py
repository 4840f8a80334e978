import logging

from prompt_kiosk.config import DEFAULT_MODEL, DEFAULT_TIMEOUT, configure_logging, load_settings


def test_defaults_without_key() -> None:
    settings = load_settings({})

    assert settings.api_key is None
    assert settings.api_key_missing is True
    assert settings.model == DEFAULT_MODEL
    assert settings.base_url is None
    assert settings.timeout == DEFAULT_TIMEOUT
    assert settings.stream is True
    assert settings.log_level == "INFO"


def test_first_non_empty_key_wins() -> None:
    settings = load_settings({"API_KEY": "  ", "GOOGLE_API_KEY": "google", "GEMINI_API_KEY": "gemini"})

    assert settings.api_key == "google"
    assert settings.api_key_missing is False


def test_overrides() -> None:
    settings = load_settings(
        {
            "API_KEY": "k",
            "GEMINI_MODEL": "gemini-2.5-pro",
            "GEMINI_BASE_URL": "http://localhost:8080/",
            "GEMINI_TIMEOUT": "30.5",
            "GEMINI_STREAM": "off",
            "LOG_LEVEL": "debug",
        }
    )

    assert settings.model == "gemini-2.5-pro"
    assert settings.base_url == "http://localhost:8080"
    assert settings.timeout == 30.5
    assert settings.stream is False
    assert settings.log_level == "DEBUG"


def test_invalid_values_fall_back() -> None:
    settings = load_settings({"GEMINI_TIMEOUT": "soon", "GEMINI_STREAM": "maybe"})

    assert settings.timeout == DEFAULT_TIMEOUT
    assert load_settings({"GEMINI_TIMEOUT": "-1"}).timeout == DEFAULT_TIMEOUT
    assert settings.stream is True


def test_process_environment(monkeypatch) -> None:
    monkeypatch.setenv("GOOGLE_API_KEY", "from-env")

    assert load_settings().api_key == "from-env"


def test_configure_logging_installs_one_handler() -> None:
    logger = logging.getLogger("prompt_kiosk")
    before = len(logger.handlers)

    configure_logging("debug")
    configure_logging("WARNING")

    assert len(logger.handlers) <= before + 1
    assert logger.level == logging.WARNING
