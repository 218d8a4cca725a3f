"""
Модуль для загрузки и валидации конфигурации прокси FaleProxy.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

_BROWSER_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class ProxyConfig(BaseModel):
    """Конфигурация одного экземпляра прокси-сервера."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = Field("127.0.0.1", min_length=1, description="Адрес для прослушивания.")
    port: int = Field(3001, ge=1, le=65535, description="TCP-порт HTTP-сервера.")
    pattern: str = Field("Yale", min_length=1, description="Заменяемое слово (с учётом регистра).")
    replacement: str = Field("Fale", description="Слово-замена.")
    timeout: float = Field(30.0, gt=0, description="Таймаут на загрузку страницы (секунд).")
    user_agent: str = Field(_BROWSER_UA, min_length=1, description="Заголовок User-Agent.")
    accept_language: str = Field("en-US,en;q=0.5", description="Заголовок Accept-Language.")
    allow_origin: str = Field("*", min_length=1, description="Значение Access-Control-Allow-Origin.")

    @field_validator("host", mode="before")
    def _strip_host(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ProxyConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект ProxyConfig.

    Без явного пути берётся configs/default.yaml, а если его нет,
    значения по умолчанию. Явно указанный, но отсутствующий файл
    приводит к FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ProxyConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return ProxyConfig(**data)
