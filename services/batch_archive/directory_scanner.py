"""
MODULE: services.batch_archive.directory_scanner
RESPONSIBILITY:
- Обход каталога батч-файлов: папки поставщиков и датированные подкаталоги
- Проверка поставщиков по списку известных
- Предупреждения о пропущенных каталогах
ALLOWED:
- Чтение файловой системы (pathlib)
- Логирование через loguru
FORBIDDEN:
- Изменение или удаление файлов
- Решения о диапазоне дат (это DateRangeFilter)
ERRORS:
- Должен пробрасывать ScanError при ошибке чтения каталога
"""

from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional

from loguru import logger

from core.models import BatchUnit, SkipReason, SkipRecord
from errors import ScanError
from services.batch_archive.date_filter import parse_batch_date

SkipCallback = Callable[[SkipRecord], None]


class DirectoryScanner:
    """Обходчик каталога батч-файлов"""

    def __init__(self, valid_suppliers: Iterable[str]):
        self.valid_suppliers = frozenset(valid_suppliers)

    def scan(self, root_path: Path, on_skip: Optional[SkipCallback] = None) -> Iterator[BatchUnit]:
        """
        Лениво перечисляет единицы архивации в каталоге root_path.

        Поставщики и даты обходятся в лексикографическом порядке. Неизвестные
        поставщики и каталоги с некорректной датой пропускаются с предупреждением.

        :param root_path: Каталог с папками поставщиков
        :param on_skip: Функция, получающая записи о пропущенных каталогах
        :raises ScanError: Если каталог не удалось прочитать
        """
        for supplier_dir in self._list_subdirectories(root_path):
            supplier = supplier_dir.name
            if supplier not in self.valid_suppliers:
                logger.warning(
                    f"Пропускаем \"{supplier}\": поставщик не входит в список известных "
                    f"(проверьте путь к каталогу батч-файлов)"
                )
                self._emit(on_skip, SkipRecord(supplier, SkipReason.UNKNOWN_SUPPLIER, supplier_dir))
                continue

            for batch_dir in self._list_subdirectories(supplier_dir):
                try:
                    batch_date = parse_batch_date(batch_dir.name)
                except ValueError:
                    logger.warning(f"Пропускаем {supplier}/{batch_dir.name}: имя каталога не является датой")
                    self._emit(
                        on_skip,
                        SkipRecord(f"{supplier}/{batch_dir.name}", SkipReason.INVALID_BATCH_DATE, batch_dir),
                    )
                    continue
                yield BatchUnit(supplier=supplier, batch_date=batch_date, path=batch_dir)

    @staticmethod
    def _emit(on_skip: Optional[SkipCallback], record: SkipRecord) -> None:
        if on_skip is not None:
            on_skip(record)

    @staticmethod
    def _list_subdirectories(path: Path) -> List[Path]:
        """Отсортированный список видимых подкаталогов"""
        try:
            entries = sorted(path.iterdir(), key=lambda entry: entry.name)
            return [
                entry for entry in entries
                if not entry.name.startswith(".") and entry.is_dir()
            ]
        except OSError as e:
            raise ScanError(f"Не удалось прочитать каталог {path}: {e}", path=path) from e
