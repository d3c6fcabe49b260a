"""
MODULE: errors
RESPONSIBILITY: Define the project-wide error taxonomy and exception hierarchy.
ALLOWED: Defining exception classes inheriting from AppError.
FORBIDDEN: Business logic, external imports (except standard library).
ERRORS: None (defines errors).

Таксономия ошибок архиватора батч-файлов.
Все исключения должны наследоваться от AppError.
"""

from pathlib import Path
from typing import Optional


class AppError(Exception):
    """Базовый класс для всех ошибок приложения"""
    pass


class ConfigError(AppError):
    """Неверные или противоречивые параметры запуска. Прерывает весь запуск."""
    pass


class ScanError(AppError):
    """Ошибка чтения каталога батч-файлов во время обхода. Прерывает весь запуск."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class StorageUnavailable(AppError):
    """Ошибка ввода-вывода при чтении или записи границы последнего запуска"""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class ArchiveStageError(AppError):
    """
    Ошибка одного этапа обработки батч-каталога.

    Фатальна только для конкретного каталога, но не для всего запуска.
    """

    stage = "unknown"

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class PackError(ArchiveStageError):
    """Ошибка упаковки каталога в архив"""
    stage = "pack"


class EncryptError(ArchiveStageError):
    """Ошибка шифрования архива"""
    stage = "encrypt"


class InvalidDestination(EncryptError):
    """Имя зашифрованного файла не соответствует соглашению <архив>.bfe"""
    pass


class UploadError(ArchiveStageError):
    """Ошибка загрузки архива в объектное хранилище"""
    stage = "upload"


class CleanupError(ArchiveStageError):
    """Ошибка удаления исходного каталога после подтверждённой загрузки"""
    stage = "cleanup"
