"""
MODULE: core.interfaces
RESPONSIBILITY: Define Protocols for dependency injection.
ALLOWED: Typing imports, Protocol.
FORBIDDEN: Implementation details, concrete classes (except data structures).
ERRORS: None.

Интерфейсы (Protocol) для внешних исполнителей архивации

Определяет контракты упаковки, шифрования, загрузки и хранения границы
запуска, чтобы конкретные реализации можно было заменять (в том числе в тестах).
"""

from datetime import date
from pathlib import Path
from typing import Optional, Protocol


class IPacker(Protocol):
    """Интерфейс упаковщика каталога в архив"""

    def pack(self, source_dir: Path, destination: Path) -> None:
        """Упаковать каталог в файл destination. Ошибка - PackError"""
        ...


class IEncryptor(Protocol):
    """Интерфейс шифровальщика архива"""

    suffix: str

    def encrypt(self, source: Path, destination: Path, passphrase: str) -> Path:
        """
        Зашифровать source в destination.

        destination обязан совпадать с source + suffix, иначе InvalidDestination.
        Ошибка шифрования - EncryptError.
        """
        ...


class IUploader(Protocol):
    """Интерфейс загрузчика в объектное хранилище"""

    def is_available(self) -> bool:
        """Проверить доступность хранилища до начала работы"""
        ...

    def upload(self, artifact_path: Path, namespace_key: str) -> str:
        """Загрузить файл под ключом <namespace_key>/<имя файла>. Ошибка - UploadError"""
        ...


class IRunBoundaryStore(Protocol):
    """Интерфейс хранилища границы последнего автоматического запуска"""

    def read_boundary(self, root_path: Path) -> Optional[date]:
        """Прочитать границу. None - запусков ещё не было. Ошибка - StorageUnavailable"""
        ...

    def write_boundary(self, root_path: Path, boundary: date) -> None:
        """Сохранить границу. Ошибка - StorageUnavailable"""
        ...
