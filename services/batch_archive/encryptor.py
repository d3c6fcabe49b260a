"""
MODULE: services.batch_archive.encryptor
RESPONSIBILITY:
- Шифрование архива парольной фразой
- Контроль имени зашифрованного файла (<архив>.bfe)
ALLOWED:
- cryptography (AES-GCM, scrypt, HMAC)
- Операции с файлами архива
- Логирование через loguru
FORBIDDEN:
- Проверка длины парольной фразы (это предусловие запуска в оркестраторе)
- Расшифровка и восстановление данных
ERRORS:
- Должен пробрасывать InvalidDestination, EncryptError

Формат файла: MAGIC | соль (16 байт) | nonce (12 байт) | шифртекст | тег (16 байт).
Соль и nonce выводятся из содержимого, поэтому один и тот же архив с той же
парольной фразой всегда даёт одинаковый зашифрованный файл.

Архив читается блоками: два прохода для соли и nonce, третий - шифрование.
Размер архива в памяти не ограничен.
"""

import hashlib
from pathlib import Path
from typing import BinaryIO, Iterator

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt
from loguru import logger

from errors import EncryptError, InvalidDestination

ENCRYPTED_SUFFIX = ".bfe"
MAGIC = b"BFE\x01"
SALT_SIZE = 16
NONCE_SIZE = 12
KEY_SIZE = 32
TAG_SIZE = 16
CHUNK_SIZE = 4 * 1024 * 1024


def derive_key(passphrase: str, salt: bytes) -> bytes:
    """Ключ AES-256 из парольной фразы (scrypt)."""
    kdf = Scrypt(salt=salt, length=KEY_SIZE, n=2 ** 14, r=8, p=1)
    return kdf.derive(passphrase.encode("utf-8"))


def _read_chunks(handle: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    while True:
        chunk = handle.read(chunk_size)
        if not chunk:
            return
        yield chunk


class PassphraseEncryptor:
    """Шифровальщик архивов (AES-256-GCM, ключ из парольной фразы)"""

    suffix = ENCRYPTED_SUFFIX

    def __init__(self, remove_source: bool = True, chunk_size: int = CHUNK_SIZE):
        self.remove_source = remove_source
        self.chunk_size = chunk_size

    def _derive_salt(self, source: Path) -> bytes:
        digest = hashlib.sha256(MAGIC)
        with source.open("rb") as handle:
            for chunk in _read_chunks(handle, self.chunk_size):
                digest.update(chunk)
        return digest.digest()[:SALT_SIZE]

    def _derive_nonce(self, source: Path, key: bytes) -> bytes:
        mac = hmac.HMAC(key, hashes.SHA256())
        with source.open("rb") as handle:
            for chunk in _read_chunks(handle, self.chunk_size):
                mac.update(chunk)
        return mac.finalize()[:NONCE_SIZE]

    def _write_encrypted(self, source: Path, destination: Path, salt: bytes,
                         key: bytes, nonce: bytes) -> None:
        encryptor = Cipher(algorithms.AES(key), modes.GCM(nonce)).encryptor()
        encryptor.authenticate_additional_data(MAGIC)
        with source.open("rb") as src, destination.open("wb") as dst:
            dst.write(MAGIC)
            dst.write(salt)
            dst.write(nonce)
            for chunk in _read_chunks(src, self.chunk_size):
                dst.write(encryptor.update(chunk))
            dst.write(encryptor.finalize())
            dst.write(encryptor.tag)

    def encrypt(self, source: Path, destination: Path, passphrase: str) -> Path:
        """
        Шифрует файл source в destination.

        :param source: Упакованный архив
        :param destination: Целевой файл, обязан быть source + ".bfe"
        :param passphrase: Парольная фраза
        :return: Путь к зашифрованному файлу
        :raises InvalidDestination: Если имя целевого файла не соответствует соглашению
        :raises EncryptError: При ошибке чтения, шифрования или записи
        """
        source = Path(source)
        destination = Path(destination)
        expected = source.with_name(source.name + self.suffix)
        if destination != expected:
            raise InvalidDestination(
                f"Зашифрованный файл должен называться {expected.name}, получено: {destination}",
                path=destination,
            )

        try:
            salt = self._derive_salt(source)
            key = derive_key(passphrase, salt)
            nonce = self._derive_nonce(source, key)
        except OSError as e:
            raise EncryptError(f"Не удалось прочитать архив {source}: {e}", path=source) from e
        except (InvalidKey, ValueError) as e:
            raise EncryptError(f"Ошибка шифрования {source.name}: {e}", path=source) from e

        try:
            self._write_encrypted(source, destination, salt, key, nonce)
        except (OSError, ValueError) as e:
            destination.unlink(missing_ok=True)
            raise EncryptError(f"Ошибка шифрования {source.name} в {destination}: {e}", path=destination) from e

        if self.remove_source:
            try:
                source.unlink(missing_ok=True)
            except OSError as e:
                # зашифрованный файл уже готов, исходный удалится вместе с рабочим каталогом
                logger.warning(f"Не удалось удалить незашифрованный архив {source}: {e}")

        logger.debug(f"Архив {source.name} зашифрован в {destination.name}")
        return destination
