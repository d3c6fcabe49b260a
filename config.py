"""
Централизованная конфигурация архиватора батч-файлов.

Правила:
- config.py является единственным источником правды для путей и ключевых настроек
- все пути хранятся как объекты pathlib.Path
- значения берутся из переменных окружения с разумными значениями по умолчанию
- при отсутствии .env в корне проекта точка входа создаёт шаблон с комментариями
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final, FrozenSet, Optional

from dotenv import load_dotenv

from errors import ConfigError


# Корень проекта (папка, где лежит данный файл)
PROJECT_ROOT: Final[Path] = Path(__file__).resolve().parent

# Путь к .env файлу приложения
APP_ENV_PATH: Final[Path] = PROJECT_ROOT / ".env"

# === Значения по умолчанию ===

DEFAULT_BATCH_FILES_PATH: Final[Path] = Path("/var/www/shared/batch-files")
DEFAULT_VALID_SUPPLIERS: Final[str] = "supplier1,supplier2,supplier3,supplier4"
DEFAULT_S3_BUCKET: Final[str] = "energy-batch-files"

# Файл с границей последнего автоматического запуска (внутри каталога батч-файлов)
BOUNDARY_FILE_NAME: Final[str] = ".last-archive-date"

# Допустимая длина парольной фразы для шифрования (включительно)
PASSPHRASE_MIN_LENGTH: Final[int] = 8
PASSPHRASE_MAX_LENGTH: Final[int] = 56


def ensure_env_file_exists(env_path: Path = APP_ENV_PATH) -> None:
    """
    Гарантирует наличие .env файла.

    Если файл отсутствует, создаёт шаблон с примерными переменными окружения
    и комментариями.
    """
    if env_path.exists():
        return

    template_lines = [
        "# Файл переменных окружения для архиватора батч-файлов",
        "# Значения ниже являются примерами. Замените их на реальные.",
        "",
        "# === Каталог с папками поставщиков ===",
        f"ARCHIVER_BATCH_FILES_PATH={DEFAULT_BATCH_FILES_PATH}",
        "",
        "# Список известных поставщиков через запятую",
        f"ARCHIVER_VALID_SUPPLIERS={DEFAULT_VALID_SUPPLIERS}",
        "",
        "# Парольная фраза для шифрования (8-56 символов). Пусто - без шифрования",
        "ARCHIVER_PASSPHRASE=",
        "",
        "# === Объектное хранилище S3 ===",
        "# Ключу AWS достаточно s3:PutObject (403 при проверке бакета допускается)",
        f"ARCHIVER_S3_BUCKET={DEFAULT_S3_BUCKET}",
        "# ARCHIVER_S3_ENDPOINT_URL=https://s3.example.com",
        "# ARCHIVER_AWS_REGION=eu-west-1",
        "",
        "# === Общие настройки ===",
        "# Каталог для временных архивов (по умолчанию системный temp)",
        "# ARCHIVER_WORK_DIR=/var/tmp",
        "ARCHIVER_MAX_WORKERS=1",
        "ARCHIVER_LOG_DIR=logs",
        "ARCHIVER_LOG_LEVEL=INFO",
        "",
    ]

    env_path.write_text("\n".join(template_lines), encoding="utf-8")


# Загружаем переменные окружения из .env (если он есть)
load_dotenv(APP_ENV_PATH)


@dataclass(frozen=True)
class ArchiverSettings:
    """Настройки окружения, общие для всех запусков"""
    batch_files_path: Path
    valid_suppliers: FrozenSet[str]
    passphrase: Optional[str]
    s3_bucket: str
    s3_endpoint_url: Optional[str]
    aws_region: Optional[str]
    work_dir: Optional[Path]
    max_workers: int


def _env_str(key: str) -> Optional[str]:
    raw = os.getenv(key)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def _env_int(key: str, default: int) -> int:
    raw = _env_str(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"Переменная {key} должна быть целым числом, получено: {raw!r}") from e


def parse_supplier_list(raw: str) -> FrozenSet[str]:
    """Разбирает список поставщиков, разделённых запятыми."""
    return frozenset(item.strip() for item in raw.split(",") if item.strip())


def load_settings() -> ArchiverSettings:
    """
    Собирает настройки из переменных окружения.

    :raises ConfigError: Если значение переменной некорректно
    """
    work_dir = _env_str("ARCHIVER_WORK_DIR")
    max_workers = _env_int("ARCHIVER_MAX_WORKERS", 1)
    if max_workers < 1:
        raise ConfigError(f"ARCHIVER_MAX_WORKERS должен быть >= 1, получено: {max_workers}")

    return ArchiverSettings(
        batch_files_path=Path(_env_str("ARCHIVER_BATCH_FILES_PATH") or DEFAULT_BATCH_FILES_PATH),
        valid_suppliers=parse_supplier_list(
            _env_str("ARCHIVER_VALID_SUPPLIERS") or DEFAULT_VALID_SUPPLIERS
        ),
        passphrase=_env_str("ARCHIVER_PASSPHRASE"),
        s3_bucket=_env_str("ARCHIVER_S3_BUCKET") or DEFAULT_S3_BUCKET,
        s3_endpoint_url=_env_str("ARCHIVER_S3_ENDPOINT_URL"),
        aws_region=_env_str("ARCHIVER_AWS_REGION"),
        work_dir=Path(work_dir) if work_dir else None,
        max_workers=max_workers,
    )
