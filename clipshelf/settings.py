from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import asdict, dataclass

log = logging.getLogger(__name__)


LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class AppSettings:
    log_level: str = "WARNING"
    show_panel_on_start: bool = True
    tray_enabled: bool = True


def default_app_dir() -> str:
    if sys.platform == "darwin":
        return os.path.join(os.path.expanduser("~"), "Library", "Application Support", "ClipShelf")
    appdata = os.environ.get("APPDATA")
    if appdata:
        return os.path.join(appdata, "ClipShelf")
    return os.path.join(os.path.expanduser("~"), ".clipshelf")


def default_config_path() -> str:
    return os.path.join(default_app_dir(), "config.json")


def _flag(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def load_settings(path: str | None = None) -> AppSettings:
    path = path or default_config_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        data = {}
    except Exception:
        log.warning("读取配置失败，使用默认配置：%s", path, exc_info=True)
        data = {}
    if not isinstance(data, dict):
        data = {}

    log_level = str(data.get("log_level") or "WARNING").upper()
    if log_level not in LOG_LEVELS:
        log_level = "WARNING"
    show_panel_on_start = _flag(data.get("show_panel_on_start"), True)
    tray_enabled = _flag(data.get("tray_enabled"), True)
    return AppSettings(
        log_level=log_level,
        show_panel_on_start=show_panel_on_start,
        tray_enabled=tray_enabled,
    )


def save_settings(settings: AppSettings, path: str | None = None) -> None:
    path = path or default_config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    data = asdict(settings)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
