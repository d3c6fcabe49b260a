from types import SimpleNamespace

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from errors import UploadError
from services.batch_archive.s3_uploader import S3Uploader


class FakeS3Client:
    def __init__(self, head_error=None, upload_error=None):
        self.head_error = head_error
        self.upload_error = upload_error
        self.head_calls = []
        self.uploaded = []

    def head_bucket(self, Bucket):
        self.head_calls.append(Bucket)
        if self.head_error is not None:
            raise self.head_error
        return {}

    def upload_file(self, filename, bucket, key):
        if self.upload_error is not None:
            raise self.upload_error
        self.uploaded.append((filename, bucket, key))


def _not_found():
    return ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")


@pytest.fixture
def artifact(tmp_path):
    path = tmp_path / "supplier1-2024-01-01.tar.bz2.bfe"
    path.write_bytes(b"payload")
    return path


def test_upload_uses_supplier_prefix(artifact):
    client = FakeS3Client()
    uploader = S3Uploader("energy-batch-files", client=client)

    key = uploader.upload(artifact, "supplier1")

    assert key == "supplier1/supplier1-2024-01-01.tar.bz2.bfe"
    assert client.uploaded == [(str(artifact), "energy-batch-files", key)]


def test_build_key_strips_slashes(artifact):
    assert S3Uploader.build_key("/supplier2/", artifact) == "supplier2/supplier1-2024-01-01.tar.bz2.bfe"


def test_upload_errors_are_wrapped(artifact):
    client = FakeS3Client(upload_error=EndpointConnectionError(endpoint_url="https://s3.example.com"))
    with pytest.raises(UploadError) as exc_info:
        S3Uploader("bucket", client=client).upload(artifact, "supplier1")
    assert exc_info.value.stage == "upload"


def test_available_when_bucket_reachable():
    client = FakeS3Client()
    assert S3Uploader("bucket", client=client).is_available() is True
    assert client.head_calls == ["bucket"]


def test_unavailable_when_bucket_missing():
    assert S3Uploader("bucket", client=FakeS3Client(head_error=_not_found())).is_available() is False


def test_unavailable_without_credentials(monkeypatch):
    uploader = S3Uploader("bucket")
    monkeypatch.setattr(uploader, "_get_session", lambda: SimpleNamespace(get_credentials=lambda: None))
    assert uploader.is_available() is False


@pytest.mark.parametrize("code", ["403", "AccessDenied"])
def test_write_only_credentials_count_as_available(code):
    error = ClientError({"Error": {"Code": code, "Message": "Forbidden"}}, "HeadBucket")
    assert S3Uploader("bucket", client=FakeS3Client(head_error=error)).is_available() is True


def test_unavailable_on_connection_error():
    error = EndpointConnectionError(endpoint_url="https://s3.example.com")
    assert S3Uploader("bucket", client=FakeS3Client(head_error=error)).is_available() is False
