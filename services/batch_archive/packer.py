"""
MODULE: services.batch_archive.packer
RESPONSIBILITY:
- Упаковка батч-каталога в архив .tar.bz2
ALLOWED:
- tarfile, pathlib
- Логирование через loguru
FORBIDDEN:
- Шифрование, сетевые операции, удаление исходных данных
ERRORS:
- Должен пробрасывать PackError

Элементы архива начинаются с имени каталога (как `tar -cjC <родитель> <каталог>`),
порядок файлов отсортирован, владелец обнулён - одинаковый вход даёт
побайтно одинаковый архив.
"""

import tarfile
from pathlib import Path

from loguru import logger

from errors import PackError

ARCHIVE_SUFFIX = ".tar.bz2"


def _normalize_member(member: tarfile.TarInfo) -> tarfile.TarInfo:
    member.uid = 0
    member.gid = 0
    member.uname = ""
    member.gname = ""
    return member


class TarBz2Packer:
    """Упаковщик каталогов в tar.bz2"""

    suffix = ARCHIVE_SUFFIX

    def __init__(self, compresslevel: int = 9):
        self.compresslevel = compresslevel

    def pack(self, source_dir: Path, destination: Path) -> None:
        """
        Упаковывает каталог source_dir в файл destination.

        :raises PackError: Если каталог не найден или при ошибке ввода-вывода
        """
        source_dir = Path(source_dir)
        destination = Path(destination)
        if not source_dir.is_dir():
            raise PackError(f"Каталог для упаковки не найден: {source_dir}", path=source_dir)

        try:
            with tarfile.open(destination, "w:bz2", compresslevel=self.compresslevel) as archive:
                archive.add(str(source_dir), arcname=source_dir.name, filter=_normalize_member)
        except (OSError, tarfile.TarError) as e:
            destination.unlink(missing_ok=True)
            raise PackError(f"Ошибка упаковки {source_dir}: {e}", path=source_dir) from e

        logger.debug(f"Каталог {source_dir} упакован в {destination.name}")
