from ical_service.config import ExportConfig, load_config


def test_defaults_without_environment(monkeypatch):
    for key in ("PRODUCT_ID", "CALENDAR_FILENAME", "MAX_ATTACHMENT_BYTES", "LOG_LEVEL"):
        monkeypatch.delenv(f"ICAL_{key}", raising=False)

    assert load_config() == ExportConfig()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ICAL_PRODUCT_ID", "-//Acme//Cal//EN")
    monkeypatch.setenv("ICAL_CALENDAR_FILENAME", "acme.ics")
    monkeypatch.setenv("ICAL_MAX_ATTACHMENT_BYTES", "2048")
    monkeypatch.setenv("ICAL_LOG_LEVEL", "debug")

    config = load_config()

    assert config.product_identifier == "-//Acme//Cal//EN"
    assert config.calendar_filename == "acme.ics"
    assert config.max_attachment_bytes == 2048
    assert config.log_level == "DEBUG"


def test_invalid_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("ICAL_MAX_ATTACHMENT_BYTES", "lots")
    monkeypatch.setenv("ICAL_LOG_LEVEL", "chatty")

    config = load_config()

    assert config.max_attachment_bytes == ExportConfig().max_attachment_bytes
    assert config.log_level == "INFO"
