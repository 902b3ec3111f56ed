from __future__ import annotations

import codecs
from dataclasses import dataclass
from pathlib import Path
import os
import yaml

from linepipe.infra.logging.setup import mapLogLevel


@dataclass(frozen=True)
class Settings:
    # Logging
    log_level: str = "INFO"
    log_dir: str | None = None

    # Artifacts
    report_dir: str | None = None

    # Input
    encoding: str = "utf-8"


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    sources_used: list[str]


class SettingsError(ValueError):
    """
    Назначение:
        Некорректное значение настройки (уровень логов, кодировка и т.п.).
    """


SETTING_KEYS = ("log_level", "log_dir", "report_dir", "encoding")

ENV_NAMES = {
    "log_level": "LINEPIPE_LOG_LEVEL",
    "log_dir": "LINEPIPE_LOG_DIR",
    "report_dir": "LINEPIPE_REPORT_DIR",
    "encoding": "LINEPIPE_ENCODING",
}


def _read_yaml_config(path: Path) -> dict:
    if not path.exists():
        return {}
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if k in SETTING_KEYS}


def _env_get(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def _validate(settings: Settings) -> None:
    try:
        mapLogLevel(settings.log_level)
    except ValueError as exc:
        raise SettingsError(str(exc)) from exc
    try:
        codecs.lookup(settings.encoding)
    except LookupError as exc:
        raise SettingsError(f"Unsupported encoding: {settings.encoding}") from exc
    # строки режутся по байту \n до декодирования
    if "\n".encode(settings.encoding) != b"\n":
        raise SettingsError(f"Unsupported encoding: {settings.encoding} (line terminator is not a single \\n byte)")


def load_settings(
    config_path: str | None,
    cli_overrides: dict,
) -> LoadedSettings:
    """
    Priority: CLI > ENV > config > defaults
    """
    sources: list[str] = []
    defaults = Settings()

    # 1) config file
    cfg: dict = {}
    if config_path:
        cfg = _read_yaml_config(Path(config_path))
        if cfg:
            sources.append("config")

    # 2) env
    env = {key: _env_get(name) for key, name in ENV_NAMES.items()}
    if any(v is not None for v in env.values()):
        sources.append("env")

    merged = {key: cfg.get(key, getattr(defaults, key)) for key in SETTING_KEYS}

    for key, value in env.items():
        if value is not None:
            merged[key] = value

    # 3) apply CLI overrides (only those explicitly passed)
    if any(v is not None for v in cli_overrides.values()):
        sources.append("cli")

    for k, v in cli_overrides.items():
        if v is None:
            continue
        merged[k] = v

    settings = Settings(
        log_level=str(merged["log_level"]),
        log_dir=str(merged["log_dir"]) if merged["log_dir"] is not None else None,
        report_dir=str(merged["report_dir"]) if merged["report_dir"] is not None else None,
        encoding=str(merged["encoding"]),
    )
    _validate(settings)

    return LoadedSettings(settings=settings, sources_used=sources)
