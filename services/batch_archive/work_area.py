"""
MODULE: services.batch_archive.work_area
RESPONSIBILITY:
- Временные каталоги для архивов: один на поставщика за запуск
ALLOWED:
- tempfile, shutil
- Логирование через loguru
FORBIDDEN:
- Изменение исходных батч-каталогов
ERRORS:
- OSError при создании каталога; ошибки удаления только логируются
"""

import shutil
import tempfile
from pathlib import Path
from threading import Lock
from typing import Dict, Optional

from loguru import logger


class WorkAreaManager:
    """Временные каталоги для архивов: один на поставщика за запуск, создаются по требованию"""

    def __init__(self, parent_dir: Optional[Path] = None):
        self.parent_dir = parent_dir
        self._dirs: Dict[str, Path] = {}
        self._lock = Lock()

    def directory_for(self, supplier: str) -> Path:
        with self._lock:
            path = self._dirs.get(supplier)
            if path is None:
                if self.parent_dir is not None:
                    Path(self.parent_dir).mkdir(parents=True, exist_ok=True)
                path = Path(tempfile.mkdtemp(
                    prefix=f"archived-{supplier}.",
                    dir=str(self.parent_dir) if self.parent_dir is not None else None,
                ))
                self._dirs[supplier] = path
                logger.debug(f"Создан рабочий каталог {path}")
            return path

    @property
    def directories(self) -> Dict[str, Path]:
        with self._lock:
            return dict(self._dirs)

    def release(self, keep: bool) -> Dict[str, Path]:
        """
        Завершает работу с временными каталогами.

        :param keep: True - оставить каталоги на диске (запуск без загрузки)
        :return: Оставленные каталоги по поставщикам
        """
        with self._lock:
            dirs, self._dirs = self._dirs, {}

        if keep:
            for supplier, path in sorted(dirs.items()):
                logger.info(f"Архивы поставщика {supplier} находятся в {path}")
            return dirs

        for path in dirs.values():
            try:
                shutil.rmtree(path)
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(f"Не удалось удалить рабочий каталог {path}: {e}")
        return {}
