"""
MODULE: services.batch_archive.boundary_store
RESPONSIBILITY:
- Хранение даты границы последнего автоматического запуска
- Один файл на каталог батч-файлов, одна дата в формате YYYY-MM-DD
ALLOWED:
- Операции с файловой системой (pathlib, os, tempfile)
- Логирование через loguru
FORBIDDEN:
- Решения о том, когда записывать границу (это оркестратор)
ERRORS:
- Должен пробрасывать StorageUnavailable
"""

import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Optional

from loguru import logger

from config import BOUNDARY_FILE_NAME
from errors import StorageUnavailable
from services.batch_archive.date_filter import parse_batch_date


class FileRunBoundaryStore:
    """Хранилище границы запуска в файле внутри каталога батч-файлов"""

    def __init__(self, file_name: str = BOUNDARY_FILE_NAME):
        self.file_name = file_name

    def boundary_path(self, root_path: Path) -> Path:
        return Path(root_path) / self.file_name

    def read_boundary(self, root_path: Path) -> Optional[date]:
        """
        Читает сохранённую границу.

        :param root_path: Каталог батч-файлов
        :return: Дата границы или None, если автоматических запусков ещё не было
        :raises StorageUnavailable: При ошибке чтения или повреждённом содержимом
        """
        path = self.boundary_path(root_path)
        try:
            text = path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            logger.info(f"Файл границы {path} не найден, нижняя граница не задана")
            return None
        except OSError as e:
            raise StorageUnavailable(f"Не удалось прочитать файл границы {path}: {e}", path=path) from e

        try:
            return parse_batch_date(text)
        except ValueError as e:
            raise StorageUnavailable(f"Файл границы {path} повреждён: {text!r}", path=path) from e

    def write_boundary(self, root_path: Path, boundary: date) -> None:
        """
        Атомарно сохраняет границу (временный файл + os.replace).

        :raises StorageUnavailable: При ошибке записи
        """
        path = self.boundary_path(root_path)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f"{self.file_name}.", dir=str(path.parent))
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(f"{boundary.isoformat()}\n")
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise StorageUnavailable(f"Не удалось записать файл границы {path}: {e}", path=path) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.debug(f"Граница запуска {boundary.isoformat()} сохранена в {path}")
