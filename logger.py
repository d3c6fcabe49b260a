"""
MODULE: logger
RESPONSIBILITY: Centralized Loguru configuration and logger instance provision.
ALLOWED: Configuring loguru, exporting `logger` object.
FORBIDDEN: Business logic, re-configuring logger in other modules.
ERRORS: OSError (if log directory creation fails).

Централизованная настройка логирования через Loguru.
ЗАПРЕЩЕНО настраивать logger в других модулях!
Остальные модули используют `from loguru import logger`, файловые
обработчики подключает только точка входа (main.py).
"""
import os
import sys
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# Удаляем стандартный handler
logger.remove()

# Консольный вывод (INFO и выше, уровень можно поднять через окружение)
logger.add(
    sys.stderr,
    format=CONSOLE_FORMAT,
    level=os.getenv("ARCHIVER_LOG_LEVEL", "INFO").upper(),
    colorize=True,
)


# Каталог уже подключённых файловых логов (подключаются один раз на процесс)
_file_log_dir: Optional[Path] = None
_file_handler_ids: List[int] = []


def setup_file_logging(log_dir: Optional[Union[str, Path]] = None) -> Path:
    """
    Подключает файловые логи приложения и ошибок.

    Повторный вызов ничего не добавляет и возвращает уже подключённый каталог.

    :param log_dir: Каталог для логов (по умолчанию ARCHIVER_LOG_DIR или ./logs)
    :return: Путь к каталогу логов
    """
    global _file_log_dir
    if _file_log_dir is not None:
        return _file_log_dir

    target = Path(log_dir or os.getenv("ARCHIVER_LOG_DIR", "logs"))
    target.mkdir(parents=True, exist_ok=True)

    # Файл приложения (DEBUG и выше)
    _file_handler_ids.append(logger.add(
        target / "app.log",
        format=FILE_FORMAT,
        level="DEBUG",
        rotation="10 MB",
        retention="30 days",
        compression="zip",
    ))

    # Файл ошибок (ERROR и выше)
    _file_handler_ids.append(logger.add(
        target / "errors.log",
        format=FILE_FORMAT,
        level="ERROR",
        rotation="10 MB",
        retention="90 days",
        compression="zip",
        backtrace=True,
        diagnose=False,
    ))
    _file_log_dir = target
    return target


__all__ = ["logger", "setup_file_logging"]
