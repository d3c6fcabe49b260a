"""
Точка входа архиватора батч-файлов.

Упаковывает, шифрует и загружает в S3 батч-каталоги поставщиков старше даты
отсечения. Предназначен для периодического запуска внешним планировщиком (cron).

Коды завершения:
  0 - всё заархивировано
  1 - критическая ошибка, ничего не обработано
  2 - запуск завершён, но часть каталогов обработать не удалось
  3 - запуск завершён, но граница автоматического режима не сохранена
  130 - запуск прерван
"""

import argparse
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional

from config import ensure_env_file_exists, load_settings
from core.models import RunConfig, RunMode, RunReport, RunStatus
from errors import AppError
from logger import logger, setup_file_logging
from orchestration.archive_service import ArchiveOrchestrator
from services.batch_archive import (
    FileRunBoundaryStore,
    PassphraseEncryptor,
    S3Uploader,
    TarBz2Packer,
)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_UNIT_FAILURES = 2
EXIT_BOUNDARY_NOT_SAVED = 3
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="batch-archiver",
        description="Упаковывает, шифрует и загружает батч-файлы поставщиков в S3.",
    )
    parser.add_argument(
        "-a", "--auto", action="store_true",
        help="Автоматический режим: архивирует всё, что появилось с прошлого запуска "
             "(дата хранится в файле .last-archive-date в каталоге батч-файлов)",
    )
    parser.add_argument("-b", "--before", metavar="YYYY-MM-DD", help="Архивировать батчи до этой даты (не включая)")
    parser.add_argument("-f", "--from", dest="earliest", metavar="YYYY-MM-DD",
                        help="Не архивировать батчи раньше этой даты")
    parser.add_argument("--bcrypt", "--passphrase", dest="passphrase",
                        help="Парольная фраза для шифрования архивов (8-56 символов)")
    parser.add_argument("-p", "--path", type=Path, help="Каталог с папками поставщиков")
    parser.add_argument("-n", "--noupload", action="store_true",
                        help="Не загружать в S3 (архивы останутся во временном каталоге)")
    parser.add_argument("--delete", action="store_true",
                        help="Удалять локальные батч-каталоги после успешной загрузки")
    parser.add_argument("--workers", type=int, help="Число параллельных потоков обработки")
    return parser


def print_report(report: RunReport) -> None:
    """Выводит человекочитаемый итог запуска."""
    print(f"\n{'=' * 60}")
    print(f"📦 ИТОГ АРХИВАЦИИ ({report.root_path}, {report.date_range.describe()})")
    print(f"{'=' * 60}")
    print(f"   ✅ Заархивировано и загружено: {report.archived_count}")
    if report.archived_not_uploaded_count:
        print(f"   📁 Заархивировано без загрузки: {report.archived_not_uploaded_count}")
    print(f"   ❌ Ошибок: {report.failed_count}")
    print(f"   ⚠️  Пропущено неизвестных поставщиков: {report.skipped_unknown_supplier_count}")

    for skip in report.skipped:
        print(f"      • {skip.name}: {skip.reason.value}")
    for failure in report.failures:
        print(f"      ❌ {failure.unit.label} [{failure.stage}]: {failure.reason}")
    for supplier, path in sorted(report.work_dirs.items()):
        print(f"   📂 Архивы {supplier} находятся в {path}")

    if report.cancelled:
        print(f"   ⏹  Запуск прерван, не обработано каталогов: {report.not_started}")
    if report.mode is RunMode.AUTOMATIC:
        if report.boundary_advanced:
            print(f"   📅 Граница сдвинута на {report.date_range.cutoff.isoformat()}")
        elif report.boundary_error:
            print(f"   ❗ ГРАНИЦА НЕ СОХРАНЕНА: {report.boundary_error}")
    print(f"{'=' * 60}\n")


def exit_code_for(report: RunReport) -> int:
    if report.status is RunStatus.CANCELLED:
        return EXIT_CANCELLED
    if report.boundary_error:
        return EXIT_BOUNDARY_NOT_SAVED
    if report.status is RunStatus.COMPLETED_WITH_FAILURES:
        return EXIT_UNIT_FAILURES
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        ensure_env_file_exists()
        setup_file_logging()
        settings = load_settings()
    except (AppError, OSError) as e:
        logger.error(f"Ошибка конфигурации: {e}")
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_FATAL

    run_config = RunConfig(
        root_path=args.path or settings.batch_files_path,
        mode=RunMode.AUTOMATIC if args.auto else RunMode.MANUAL,
        cutoff_date=args.before,
        earliest_date=args.earliest,
        passphrase=args.passphrase if args.passphrase is not None else settings.passphrase,
        upload_enabled=not args.noupload,
        delete_after_upload=args.delete,
        max_workers=args.workers if args.workers is not None else settings.max_workers,
    )

    orchestrator = ArchiveOrchestrator(
        valid_suppliers=settings.valid_suppliers,
        packer=TarBz2Packer(),
        encryptor=PassphraseEncryptor(),
        uploader=S3Uploader(
            settings.s3_bucket,
            endpoint_url=settings.s3_endpoint_url,
            region_name=settings.aws_region,
        ),
        boundary_store=FileRunBoundaryStore(),
        work_dir=settings.work_dir,
        stop_event=threading.Event(),
    )

    def handle_signal(signum, frame) -> None:
        logger.warning(f"Получен сигнал {signum}, текущий каталог будет дообработан")
        orchestrator.stop_event.set()

    previous_handlers = {
        signum: signal.signal(signum, handle_signal) for signum in (signal.SIGTERM, signal.SIGINT)
    }

    try:
        report = orchestrator.run(run_config)
    except AppError as e:
        logger.error(f"Архивация не выполнена: {e}")
        print(f"❌ {e}", file=sys.stderr)
        print("Используйте `batch-archiver --help` для справки.", file=sys.stderr)
        return EXIT_FATAL
    finally:
        for signum, handler in previous_handlers.items():
            signal.signal(signum, handler)

    print_report(report)
    return exit_code_for(report)


if __name__ == "__main__":
    sys.exit(main())
