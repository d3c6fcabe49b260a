"""
MODULE: services.batch_archive
RESPONSIBILITY: Package initialization for batch files archiving services.
ALLOWED: services.batch_archive submodules.
FORBIDDEN: None.
ERRORS: None.

Сервисы архивации батч-файлов поставщиков.

Разделены на подмодули:
- directory_scanner: Обход каталога поставщиков и датированных батчей
- date_filter: Разбор дат и фильтр по диапазону
- boundary_store: Граница последнего автоматического запуска
- packer: Упаковка каталога в tar.bz2
- encryptor: Шифрование архива парольной фразой
- s3_uploader: Загрузка в S3
- work_area: Временные рабочие каталоги
- pipeline: Последовательная обработка одного каталога
"""

from services.batch_archive.boundary_store import FileRunBoundaryStore
from services.batch_archive.date_filter import DateRangeFilter, parse_batch_date
from services.batch_archive.directory_scanner import DirectoryScanner
from services.batch_archive.encryptor import PassphraseEncryptor
from services.batch_archive.packer import TarBz2Packer
from services.batch_archive.pipeline import ArchivePipeline
from services.batch_archive.s3_uploader import S3Uploader
from services.batch_archive.work_area import WorkAreaManager

__all__ = [
    'ArchivePipeline',
    'DateRangeFilter',
    'DirectoryScanner',
    'FileRunBoundaryStore',
    'PassphraseEncryptor',
    'S3Uploader',
    'TarBz2Packer',
    'WorkAreaManager',
    'parse_batch_date',
]
