# -*- coding: utf-8 -*-
# последние язык и задержка между прогонами (json рядом с логами)
import json
import logging
import os
from dataclasses import asdict, dataclass, replace

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "_settings.json"


@dataclass
class Settings:
    language: str = "en"
    message_delay_ms: int = 1000
    show_notifications: bool = True


def settings_path(base_dir: str) -> str:
    return os.path.join(base_dir, SETTINGS_FILENAME)


def load_settings(path: str, defaults: Settings = None) -> Settings:
    """Читает настройки; нет файла или он битый — значения по умолчанию"""
    settings = replace(defaults) if defaults is not None else Settings()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return settings
    except (OSError, ValueError) as e:
        logger.warning("settings: не удалось прочитать %s: %s", path, e)
        return settings
    if not isinstance(data, dict):
        return settings

    language = data.get("language")
    if isinstance(language, str) and language:
        settings.language = language
    try:
        settings.message_delay_ms = max(0, int(data.get("message_delay_ms", settings.message_delay_ms)))
    except (TypeError, ValueError):
        pass
    if isinstance(data.get("show_notifications"), bool):
        settings.show_notifications = data["show_notifications"]
    return settings


def save_settings(path: str, settings: Settings):
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(settings), f, ensure_ascii=False, indent=2)
    except OSError as e:
        logger.warning("settings: не удалось сохранить %s: %s", path, e)
