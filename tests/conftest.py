"""Общие фикстуры тестов архиватора."""

import sys
from datetime import date
from pathlib import Path
from typing import Iterable, List, Tuple

import pytest

# Добавляем корневую директорию в путь
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from errors import PackError, StorageUnavailable, UploadError  # noqa: E402


class FakePacker:
    """Упаковщик, который пишет в архив список файлов каталога."""

    suffix = ".tar.bz2"

    def __init__(self, fail_for: Iterable[str] = ()):
        self.fail_for = set(fail_for)
        self.calls: List[Path] = []

    def pack(self, source_dir: Path, destination: Path) -> None:
        self.calls.append(Path(source_dir))
        label = f"{Path(source_dir).parent.name}/{Path(source_dir).name}"
        if label in self.fail_for:
            raise PackError(f"cannot pack {label}", path=source_dir)
        names = sorted(p.name for p in Path(source_dir).iterdir())
        Path(destination).write_text("\n".join([label] + names), encoding="utf-8")


class FakeUploader:
    """Загрузчик, запоминающий содержимое загруженных файлов."""

    def __init__(self, available: bool = True, fail_for: Iterable[str] = ()):
        self.available = available
        self.fail_for = set(fail_for)
        self.availability_checks = 0
        self.uploads: List[Tuple[str, str, bytes]] = []

    def is_available(self) -> bool:
        self.availability_checks += 1
        return self.available

    def upload(self, artifact_path: Path, namespace_key: str) -> str:
        artifact_path = Path(artifact_path)
        if artifact_path.name in self.fail_for:
            raise UploadError(f"network down for {artifact_path.name}", path=artifact_path)
        self.uploads.append((namespace_key, artifact_path.name, artifact_path.read_bytes()))
        return f"{namespace_key}/{artifact_path.name}"

    @property
    def keys(self) -> List[str]:
        return [f"{namespace}/{name}" for namespace, name, _ in self.uploads]


class MemoryBoundaryStore:
    """Хранилище границы в памяти (по корню каталога)."""

    def __init__(self, initial=None, fail_on_write: bool = False):
        self.boundaries = dict(initial or {})
        self.fail_on_write = fail_on_write
        self.writes: List[Tuple[Path, date]] = []

    def read_boundary(self, root_path: Path):
        return self.boundaries.get(Path(root_path))

    def write_boundary(self, root_path: Path, boundary: date) -> None:
        if self.fail_on_write:
            raise StorageUnavailable("disk is read-only", path=Path(root_path))
        self.writes.append((Path(root_path), boundary))
        self.boundaries[Path(root_path)] = boundary


def make_batch_dirs(root: Path, *labels: str) -> List[Path]:
    """Создаёт каталоги вида <поставщик>/<дата> с одним файлом данных."""
    created = []
    for label in labels:
        batch_dir = root / label
        batch_dir.mkdir(parents=True, exist_ok=True)
        (batch_dir / "readings.csv").write_text(f"{label},42\n", encoding="utf-8")
        created.append(batch_dir)
    return created


@pytest.fixture
def batch_root(tmp_path):
    root = tmp_path / "batch-files"
    root.mkdir()
    return root


@pytest.fixture
def work_dir(tmp_path):
    return tmp_path / "work"


@pytest.fixture
def fake_packer():
    return FakePacker()


@pytest.fixture
def fake_uploader():
    return FakeUploader()


@pytest.fixture
def memory_store():
    return MemoryBoundaryStore()
