"""
MODULE: core.models
RESPONSIBILITY: Define domain data structures (dataclasses, enums).
ALLOWED: Dataclasses, Enums, Typing.
FORBIDDEN: Business logic, filesystem or network operations.
ERRORS: None.

Модели данных архиватора батч-файлов

Модуль содержит dataclass модели для представления сущностей системы:
- Единица архивации (поставщик, дата, каталог)
- Диапазон дат и параметры запуска
- Результаты обработки каталогов и итоговый отчёт запуска
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class RunMode(Enum):
    """Режим запуска архиватора"""
    MANUAL = "manual"
    AUTOMATIC = "automatic"


class PipelineOutcome(Enum):
    """Итог обработки одного батч-каталога"""
    ARCHIVED = "archived"
    ARCHIVED_NOT_UPLOADED = "archived_not_uploaded"
    FAILED = "failed"


class SkipReason(Enum):
    """Причина пропуска каталога при обходе"""
    UNKNOWN_SUPPLIER = "unknown_supplier"
    INVALID_BATCH_DATE = "invalid_batch_date"


class RunStatus(Enum):
    """Итоговое состояние завершённого запуска"""
    SUCCESS = "success"
    COMPLETED_WITH_FAILURES = "completed_with_failures"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class BatchUnit:
    """
    Единица архивации: каталог одного поставщика за одну дату

    Attributes:
        supplier: Ключ поставщика из списка известных
        batch_date: Дата батча (имя каталога)
        path: Путь к исходному каталогу
    """
    supplier: str
    batch_date: date
    path: Path

    @property
    def label(self) -> str:
        return f"{self.supplier}/{self.batch_date.isoformat()}"


@dataclass(frozen=True)
class DateRange:
    """
    Диапазон дат архивации

    Attributes:
        cutoff: Верхняя граница (не включается)
        earliest: Нижняя граница (включается) или None
    """
    cutoff: date
    earliest: Optional[date] = None

    def describe(self) -> str:
        if self.earliest is not None:
            return f"с {self.earliest.isoformat()} до {self.cutoff.isoformat()}"
        return f"до {self.cutoff.isoformat()}"


@dataclass(frozen=True)
class ArchiveOptions:
    """Параметры обработки, общие для всех каталогов одного запуска"""
    passphrase: Optional[str] = None
    upload_enabled: bool = True
    delete_after_upload: bool = False

    @property
    def encryption_enabled(self) -> bool:
        return bool(self.passphrase)


@dataclass(frozen=True)
class RunConfig:
    """
    Параметры одного запуска архиватора

    Даты передаются строками в формате YYYY-MM-DD и проверяются оркестратором.
    """
    root_path: Path
    mode: RunMode = RunMode.MANUAL
    cutoff_date: Optional[str] = None
    earliest_date: Optional[str] = None
    passphrase: Optional[str] = None
    upload_enabled: bool = True
    delete_after_upload: bool = False
    max_workers: int = 1

    def archive_options(self) -> ArchiveOptions:
        return ArchiveOptions(
            passphrase=self.passphrase or None,
            upload_enabled=self.upload_enabled,
            delete_after_upload=self.delete_after_upload,
        )


@dataclass(frozen=True)
class SkipRecord:
    """Каталог, пропущенный при обходе (предупреждение, не ошибка)"""
    name: str
    reason: SkipReason
    path: Path


@dataclass
class PipelineResult:
    """
    Результат обработки одного батч-каталога

    Attributes:
        unit: Обработанная единица
        outcome: Итог обработки
        artifact_path: Итоговый файл архива (если создан)
        remote_key: Ключ в объектном хранилище (если загружен)
        source_deleted: Был ли удалён исходный каталог
        stage: Этап, на котором произошла ошибка
        reason: Текст ошибки
    """
    unit: BatchUnit
    outcome: PipelineOutcome
    artifact_path: Optional[Path] = None
    remote_key: Optional[str] = None
    source_deleted: bool = False
    stage: Optional[str] = None
    reason: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.outcome is PipelineOutcome.FAILED


@dataclass
class RunReport:
    """Итоговый отчёт запуска архиватора"""
    mode: RunMode
    date_range: DateRange
    root_path: Path
    results: List[PipelineResult] = field(default_factory=list)
    skipped: List[SkipRecord] = field(default_factory=list)
    out_of_range: int = 0
    not_started: int = 0
    work_dirs: Dict[str, Path] = field(default_factory=dict)
    cancelled: bool = False
    boundary_advanced: bool = False
    boundary_error: Optional[str] = None

    def _count(self, outcome: PipelineOutcome) -> int:
        return sum(1 for result in self.results if result.outcome is outcome)

    @property
    def archived_count(self) -> int:
        return self._count(PipelineOutcome.ARCHIVED)

    @property
    def archived_not_uploaded_count(self) -> int:
        return self._count(PipelineOutcome.ARCHIVED_NOT_UPLOADED)

    @property
    def failed_count(self) -> int:
        return self._count(PipelineOutcome.FAILED)

    @property
    def skipped_unknown_supplier_count(self) -> int:
        return sum(1 for skip in self.skipped if skip.reason is SkipReason.UNKNOWN_SUPPLIER)

    @property
    def failures(self) -> List[PipelineResult]:
        return [result for result in self.results if result.failed]

    @property
    def status(self) -> RunStatus:
        if self.cancelled:
            return RunStatus.CANCELLED
        if self.failed_count:
            return RunStatus.COMPLETED_WITH_FAILURES
        return RunStatus.SUCCESS
