import pytest

from linepipe.config.config import ENV_NAMES, Settings, SettingsError, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES.values():
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_sources():
    loaded = load_settings(config_path=None, cli_overrides={"log_level": None})

    assert loaded.settings == Settings()
    assert loaded.sources_used == []


def test_priority_cli_over_env_over_config(tmp_path, monkeypatch):
    cfg = tmp_path / "config.yml"
    cfg.write_text(
        "\n".join([
            "log_level: DEBUG",
            'log_dir: "cfg_logs"',
            'report_dir: "cfg_reports"',
            "encoding: latin-1",
            "unknown_key: ignored",
        ]),
        encoding="utf-8",
    )

    # ENV overrides config
    monkeypatch.setenv("LINEPIPE_LOG_DIR", "env_logs")
    monkeypatch.setenv("LINEPIPE_REPORT_DIR", "env_reports")
    monkeypatch.setenv("LINEPIPE_ENCODING", "   ")

    # CLI overrides env
    loaded = load_settings(
        config_path=str(cfg),
        cli_overrides={"log_level": None, "log_dir": None, "report_dir": "cli_reports", "encoding": None},
    )

    assert loaded.settings.log_level == "DEBUG"
    assert loaded.settings.log_dir == "env_logs"
    assert loaded.settings.report_dir == "cli_reports"
    # blank env value is ignored
    assert loaded.settings.encoding == "latin-1"
    assert loaded.sources_used == ["config", "env", "cli"]


def test_missing_or_non_mapping_config_is_ignored(tmp_path):
    cfg = tmp_path / "list.yml"
    cfg.write_text("- a\n- b\n", encoding="utf-8")

    assert load_settings(str(cfg), {}).sources_used == []
    assert load_settings(str(tmp_path / "absent.yml"), {}).sources_used == []


@pytest.mark.parametrize("encoding", ["utf-16-le", "utf-16", "utf-32"])
def test_encodings_without_single_byte_newline_are_rejected(encoding):
    with pytest.raises(SettingsError, match="line terminator"):
        load_settings(None, {"encoding": encoding})


def test_invalid_values_are_rejected():
    with pytest.raises(SettingsError, match="Unsupported log level"):
        load_settings(None, {"log_level": "LOUD"})
    with pytest.raises(SettingsError, match="Unsupported encoding"):
        load_settings(None, {"encoding": "no-such-codec"})
