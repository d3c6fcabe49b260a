"""
MODULE: services.batch_archive.s3_uploader
RESPONSIBILITY:
- Загрузка архивов в объектное хранилище S3
- Проверка доступности хранилища до начала работы
ALLOWED:
- boto3 / botocore
- Логирование через loguru
FORBIDDEN:
- Повторные попытки загрузки (политика повторов - снаружи)
- Удаление локальных файлов
ERRORS:
- Должен пробрасывать UploadError
"""

from pathlib import Path
from typing import Any, Optional

import boto3
from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from errors import UploadError

# HeadBucket без s3:ListBucket отвечает 403 даже для существующего бакета
FORBIDDEN_CODES = frozenset({"403", "AccessDenied", "Forbidden"})


class S3Uploader:
    """Загрузчик архивов в S3 (ключ: <поставщик>/<имя файла>)"""

    def __init__(
        self,
        bucket: str,
        client: Optional[Any] = None,
        endpoint_url: Optional[str] = None,
        region_name: Optional[str] = None,
    ):
        self.bucket = bucket
        self.endpoint_url = endpoint_url
        self.region_name = region_name
        self._session: Optional[boto3.session.Session] = None
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._get_session().client(
                "s3",
                endpoint_url=self.endpoint_url,
                region_name=self.region_name,
            )
        return self._client

    def _get_session(self) -> boto3.session.Session:
        if self._session is None:
            self._session = boto3.session.Session(region_name=self.region_name)
        return self._session

    @staticmethod
    def build_key(namespace_key: str, artifact_path: Path) -> str:
        return f"{namespace_key.strip('/')}/{Path(artifact_path).name}"

    def is_available(self) -> bool:
        """
        Проверяет, что учётные данные найдены и бакет доступен.

        Ответ 403 на HeadBucket считается доступностью: ключу для архивации
        достаточно s3:PutObject.

        :return: True если можно загружать
        """
        try:
            if self._client is None and self._get_session().get_credentials() is None:
                logger.error("Учётные данные AWS не найдены, загрузка в S3 невозможна")
                return False
            self.client.head_bucket(Bucket=self.bucket)
            return True
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in FORBIDDEN_CODES:
                logger.warning(
                    f"Нет прав на проверку бакета S3 {self.bucket} ({code}), "
                    f"считаем его доступным для загрузки"
                )
                return True
            logger.error(f"Бакет S3 {self.bucket} недоступен: {e}")
            return False
        except BotoCoreError as e:
            logger.error(f"Бакет S3 {self.bucket} недоступен: {e}")
            return False

    def upload(self, artifact_path: Path, namespace_key: str) -> str:
        """
        Загружает файл в бакет.

        :param artifact_path: Локальный файл архива
        :param namespace_key: Префикс ключа (ключ поставщика)
        :return: Ключ объекта в бакете
        :raises UploadError: При любой ошибке загрузки
        """
        artifact_path = Path(artifact_path)
        key = self.build_key(namespace_key, artifact_path)
        try:
            self.client.upload_file(str(artifact_path), self.bucket, key)
        except (Boto3Error, BotoCoreError, ClientError, OSError) as e:
            raise UploadError(
                f"Ошибка загрузки {artifact_path.name} в s3://{self.bucket}/{key}: {e}",
                path=artifact_path,
            ) from e

        logger.info(f"Загружено: s3://{self.bucket}/{key}")
        return key
