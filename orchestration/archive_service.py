"""
Оркестратор запуска архивации батч-файлов.

Задачи:
- определить диапазон дат (ручной режим или автоматический по сохранённой границе);
- проверить предусловия запуска до обработки первого каталога;
- пройти по каталогам поставщиков, отфильтровать по датам и обработать каждый;
- собрать итоговый отчёт и в автоматическом режиме сдвинуть границу.

ВНИМАНИЕ:
- Ошибка одного каталога не прерывает запуск;
- Граница пишется только после полного завершения обхода (не при отмене и не при ScanError);
- Упаковка, шифрование, загрузка и хранение границы передаются через конструктор.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from loguru import logger

from config import PASSPHRASE_MAX_LENGTH, PASSPHRASE_MIN_LENGTH
from core.interfaces import IEncryptor, IPacker, IRunBoundaryStore, IUploader
from core.models import (
    ArchiveOptions,
    BatchUnit,
    DateRange,
    PipelineResult,
    RunConfig,
    RunMode,
    RunReport,
)
from errors import ConfigError, StorageUnavailable
from services.batch_archive.date_filter import DateRangeFilter, parse_batch_date
from services.batch_archive.directory_scanner import DirectoryScanner
from services.batch_archive.pipeline import ArchivePipeline
from services.batch_archive.work_area import WorkAreaManager


class ArchiveOrchestrator:
    """
    Класс-оркестратор одного запуска архивации.

    Взаимодействие с:
    - файловой системой - через DirectoryScanner и ArchivePipeline;
    - хранилищем границы - через IRunBoundaryStore;
    - упаковщиком, шифровальщиком и S3 - через интерфейсы core.interfaces.
    """

    def __init__(
        self,
        *,
        valid_suppliers: Iterable[str],
        packer: IPacker,
        encryptor: IEncryptor,
        uploader: Optional[IUploader],
        boundary_store: IRunBoundaryStore,
        work_dir: Optional[Path] = None,
        today: Callable[[], date] = date.today,
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        self._scanner = DirectoryScanner(valid_suppliers)
        self._filter = DateRangeFilter()
        self._packer = packer
        self._encryptor = encryptor
        self._uploader = uploader
        self._boundary_store = boundary_store
        self._work_dir = work_dir
        self._today = today
        self._stop_event = stop_event or threading.Event()

    @property
    def stop_event(self) -> threading.Event:
        return self._stop_event

    def run(self, run_config: RunConfig) -> RunReport:
        """
        Выполняет один запуск архивации.

        Returns:
            RunReport: отчёт о завершённом (возможно, с ошибками по каталогам) запуске

        Raises:
            ConfigError: неверные параметры, недоступное хранилище или каталог
            StorageUnavailable: не удалось прочитать границу автоматического запуска
            ScanError: ошибка чтения каталогов во время обхода
        """
        # отмена относится только к текущему запуску
        self._stop_event.clear()
        root_path = Path(run_config.root_path)
        today = self._today()
        date_range, previous_boundary = self._resolve_date_range(run_config, root_path, today)
        options = run_config.archive_options()
        self._validate_preconditions(run_config, root_path, options)

        logger.info(f"Архивация файлов в {root_path} {date_range.describe()}...")
        if date_range.earliest is not None and date_range.earliest >= date_range.cutoff:
            logger.warning(f"Диапазон {date_range.describe()} пуст, архивировать нечего")

        report = RunReport(mode=run_config.mode, date_range=date_range, root_path=root_path)
        work_area = WorkAreaManager(self._work_dir)
        pipeline = ArchivePipeline(self._packer, self._encryptor, self._uploader, work_area)

        try:
            units = self._collect_units(root_path, date_range, report)
            if run_config.max_workers > 1:
                results = self._process_concurrently(pipeline, units, options, run_config.max_workers)
            else:
                results = self._process_sequentially(pipeline, units, options)
        finally:
            report.work_dirs = work_area.release(keep=not options.upload_enabled)

        report.results = sorted(results, key=lambda r: (r.unit.supplier, r.unit.batch_date))
        report.not_started = len(units) - len(results)
        report.cancelled = self._stop_event.is_set() and report.not_started > 0

        if run_config.mode is RunMode.AUTOMATIC:
            self._advance_boundary(root_path, date_range.cutoff, previous_boundary, report)

        logger.info(
            f"Архивация завершена. Заархивировано: {report.archived_count}, "
            f"без загрузки: {report.archived_not_uploaded_count}, ошибок: {report.failed_count}, "
            f"пропущено поставщиков: {report.skipped_unknown_supplier_count}"
        )
        return report

    def _resolve_date_range(self, run_config: RunConfig, root_path: Path, today: date):
        """Определяет диапазон дат и (в автоматическом режиме) прежнюю границу."""
        if run_config.mode is RunMode.AUTOMATIC:
            if run_config.cutoff_date or run_config.earliest_date:
                raise ConfigError(
                    "В автоматическом режиме нельзя указывать даты --before и --from"
                )
            previous = self._boundary_store.read_boundary(root_path)
            return DateRange(cutoff=today, earliest=previous), previous

        if not run_config.cutoff_date:
            raise ConfigError("Укажите дату отсечения, например: --before 2014-09-10")
        cutoff = self._parse_config_date(run_config.cutoff_date, "cutoff")
        if cutoff >= today:
            raise ConfigError(
                f"Дата отсечения {cutoff.isoformat()} должна быть раньше сегодняшней "
                f"({today.isoformat()}), чтобы не архивировать файлы, которые ещё создаются"
            )

        earliest = None
        if run_config.earliest_date:
            earliest = self._parse_config_date(run_config.earliest_date, "earliest")
        return DateRange(cutoff=cutoff, earliest=earliest), None

    @staticmethod
    def _parse_config_date(value: str, name: str) -> date:
        try:
            return parse_batch_date(value)
        except ValueError as e:
            raise ConfigError(f"Некорректная дата {name}: {value!r}, ожидается YYYY-MM-DD") from e

    def _validate_preconditions(self, run_config: RunConfig, root_path: Path, options: ArchiveOptions) -> None:
        if options.encryption_enabled:
            length = len(options.passphrase)
            if not PASSPHRASE_MIN_LENGTH <= length <= PASSPHRASE_MAX_LENGTH:
                raise ConfigError(
                    f"Длина парольной фразы должна быть от {PASSPHRASE_MIN_LENGTH} "
                    f"до {PASSPHRASE_MAX_LENGTH} символов, получено: {length}"
                )

        if run_config.max_workers < 1:
            raise ConfigError(f"Число потоков должно быть >= 1, получено: {run_config.max_workers}")

        if options.upload_enabled:
            if self._uploader is None or not self._uploader.is_available():
                raise ConfigError("Хранилище для загрузки недоступно. Проверьте настройки S3")

        if not root_path.is_dir():
            raise ConfigError(f"Каталог батч-файлов не найден: {root_path}")

    def _collect_units(self, root_path: Path, date_range: DateRange, report: RunReport) -> List[BatchUnit]:
        """Обходит каталог целиком до начала обработки. ScanError пробрасывается."""
        units: List[BatchUnit] = []
        for unit in self._scanner.scan(root_path, on_skip=report.skipped.append):
            if self._filter.includes(unit.batch_date, date_range):
                units.append(unit)
            else:
                report.out_of_range += 1
        logger.info(f"Каталогов для архивации: {len(units)}, вне диапазона: {report.out_of_range}")
        return units

    def _process_unit(self, pipeline: ArchivePipeline, unit: BatchUnit,
                      options: ArchiveOptions) -> Optional[PipelineResult]:
        if self._stop_event.is_set():
            logger.debug(f"Запуск отменён, {unit.label} не обрабатывается")
            return None
        return pipeline.process(unit, options)

    def _process_sequentially(self, pipeline: ArchivePipeline, units: List[BatchUnit],
                              options: ArchiveOptions) -> List[PipelineResult]:
        results: List[PipelineResult] = []
        for unit in units:
            result = self._process_unit(pipeline, unit, options)
            if result is None:
                break
            results.append(result)
        return results

    def _process_concurrently(self, pipeline: ArchivePipeline, units: List[BatchUnit],
                              options: ArchiveOptions, max_workers: int) -> List[PipelineResult]:
        results: List[PipelineResult] = []
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="archive") as executor:
            futures = [executor.submit(self._process_unit, pipeline, unit, options) for unit in units]
            for future in as_completed(futures):
                result = future.result()
                if result is not None:
                    results.append(result)
        return results

    def _advance_boundary(self, root_path: Path, cutoff: date, previous: Optional[date],
                          report: RunReport) -> None:
        """Сохраняет новую границу, если обход завершился полностью."""
        if report.cancelled:
            logger.warning("Запуск отменён, граница автоматического режима не сдвигается")
            return
        if previous is not None and cutoff < previous:
            logger.warning(
                f"Новая граница {cutoff.isoformat()} раньше сохранённой {previous.isoformat()}, "
                f"граница не изменяется"
            )
            return

        try:
            self._boundary_store.write_boundary(root_path, cutoff)
        except StorageUnavailable as e:
            report.boundary_error = str(e)
            logger.error(
                f"Граница {cutoff.isoformat()} НЕ сохранена: {e}. "
                f"Следующий автоматический запуск повторно обработает этот диапазон"
            )
            return

        report.boundary_advanced = True
        logger.info(f"Граница автоматического режима сдвинута на {cutoff.isoformat()}")
