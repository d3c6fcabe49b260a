"""
MODULE: services.batch_archive.pipeline
RESPONSIBILITY:
- Обработка одного батч-каталога: упаковка -> шифрование -> загрузка -> удаление
- Изоляция ошибок: сбой одного каталога не влияет на остальные
ALLOWED:
- Вызовы упаковщика, шифровальщика и загрузчика через интерфейсы core.interfaces
- Удаление исходного каталога ТОЛЬКО после подтверждённой загрузки
- Логирование через loguru
FORBIDDEN:
- Выбор каталогов и диапазона дат
- Запись границы запуска
- Повторные попытки
ERRORS:
- Ошибки этапов (ArchiveStageError) и любые другие исключения адаптеров
  превращаются в результат FAILED с этапом, не пробрасываются
"""

import shutil
from pathlib import Path
from typing import Optional

from loguru import logger

from core.interfaces import IEncryptor, IPacker, IUploader
from core.models import ArchiveOptions, BatchUnit, PipelineOutcome, PipelineResult
from errors import ArchiveStageError, CleanupError
from services.batch_archive.packer import ARCHIVE_SUFFIX
from services.batch_archive.work_area import WorkAreaManager


class ArchivePipeline:
    """Последовательная обработка одного батч-каталога"""

    def __init__(
        self,
        packer: IPacker,
        encryptor: IEncryptor,
        uploader: Optional[IUploader],
        work_area: WorkAreaManager,
    ):
        self.packer = packer
        self.encryptor = encryptor
        self.uploader = uploader
        self.work_area = work_area

    def artifact_path_for(self, unit: BatchUnit) -> Path:
        work_dir = self.work_area.directory_for(unit.supplier)
        return work_dir / f"{unit.supplier}-{unit.batch_date.isoformat()}{ARCHIVE_SUFFIX}"

    def process(self, unit: BatchUnit, options: ArchiveOptions) -> PipelineResult:
        """
        Обрабатывает один каталог.

        Args:
            unit: Единица архивации
            options: Параметры запуска (шифрование, загрузка, удаление)

        Returns:
            PipelineResult: ARCHIVED, ARCHIVED_NOT_UPLOADED или FAILED с этапом и причиной
        """
        result = PipelineResult(unit=unit, outcome=PipelineOutcome.FAILED)
        stage = "prepare"
        logger.info(f"Архивация {unit.label}")

        try:
            artifact = self.artifact_path_for(unit)

            stage = "pack"
            self.packer.pack(unit.path, artifact)
            result.artifact_path = artifact

            if options.encryption_enabled:
                stage = "encrypt"
                encrypted = artifact.with_name(artifact.name + self.encryptor.suffix)
                artifact = self.encryptor.encrypt(artifact, encrypted, options.passphrase)
                result.artifact_path = artifact

            if not options.upload_enabled:
                result.outcome = PipelineOutcome.ARCHIVED_NOT_UPLOADED
                return result

            stage = "upload"
            result.remote_key = self.uploader.upload(artifact, unit.supplier)
            result.outcome = PipelineOutcome.ARCHIVED

            if options.delete_after_upload:
                stage = "cleanup"
                self._delete_source(unit)
                result.source_deleted = True

        except ArchiveStageError as e:
            result.outcome = PipelineOutcome.FAILED
            result.stage = e.stage
            result.reason = str(e)
            logger.error(f"Ошибка архивации {unit.label} на этапе {e.stage}: {e}")
        except Exception as e:
            # прочие сбои адаптеров: FAILED на текущем этапе
            result.outcome = PipelineOutcome.FAILED
            result.stage = stage
            result.reason = f"{type(e).__name__}: {e}"
            logger.exception(f"Непредвиденная ошибка архивации {unit.label} на этапе {stage}: {e}")

        return result

    @staticmethod
    def _delete_source(unit: BatchUnit) -> None:
        try:
            shutil.rmtree(unit.path)
        except OSError as e:
            raise CleanupError(
                f"Архив загружен, но исходный каталог {unit.path} удалить не удалось: {e}",
                path=unit.path,
            ) from e
        logger.info(f"Исходный каталог {unit.label} удалён после загрузки")
