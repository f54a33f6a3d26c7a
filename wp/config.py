"""Конфигурация WordPress Content Source: config/wordpress.yml + переопределения из env."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

ENV_BASE_URL = "WORDPRESS_URL"
ENV_TIMEOUT_SEC = "WORDPRESS_TIMEOUT_SEC"


@dataclass
class WPContentConfig:
    """Параметры подключения к сайту WordPress.

    base_url не валидируется: пустая строка даёт запросы на относительный адрес,
    и ошибка всплывёт уже из HTTP-клиента.
    """
    base_url: str = ""
    timeout_sec: Optional[float] = None  # None — без явного таймаута


def _parse_timeout(value: Any, source: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{source}: timeout_sec должен быть числом, получено {value!r}") from None
    if timeout <= 0:
        return None
    return timeout


def load_config_yaml(path: Path) -> Dict[str, Any]:
    """Прочитать YAML-конфиг. Отсутствующий или пустой файл — пустой словарь."""
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(
            f"Ошибка разбора YAML в {path}: {e}. Проверьте синтаксис (отступы, кавычки)."
        ) from e
    if not data or not isinstance(data, dict):
        return {}
    return data


def load_config(
    config_path: Optional[Path] = None,
    project_root: Optional[Path] = None,
    environ: Optional[Dict[str, str]] = None,
) -> WPContentConfig:
    """Собрать конфиг: дефолты < YAML < env (WORDPRESS_URL, WORDPRESS_TIMEOUT_SEC).

    Вызывается один раз при старте; результат передаётся в WPRestClient.
    """
    if project_root is None:
        project_root = Path(__file__).resolve().parent.parent
    if config_path is None:
        config_path = project_root / "config" / "wordpress.yml"
    if environ is None:
        environ = dict(os.environ)

    data = load_config_yaml(config_path)

    base_url = str(data.get("base_url") or "").strip()
    timeout_sec = _parse_timeout(data.get("timeout_sec"), str(config_path))

    env_url = (environ.get(ENV_BASE_URL) or "").strip()
    if env_url:
        base_url = env_url
    env_timeout = (environ.get(ENV_TIMEOUT_SEC) or "").strip()
    if env_timeout:
        timeout_sec = _parse_timeout(env_timeout, ENV_TIMEOUT_SEC)

    return WPContentConfig(base_url=base_url.rstrip("/"), timeout_sec=timeout_sec)
