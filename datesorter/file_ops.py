"""
Модуль для операций с файловой системой.

Перемещает файл в каталог назначения: сначала атомарным переименованием,
а если источник и назначение на разных устройствах, копированием с
последующим удалением исходного файла.
"""

import errno
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from .errors import FileOperationError
from .logger import DateSorterLogger

MOVED = 'moved'
COPIED = 'copied'
SKIPPED = 'skipped'
PLANNED = 'planned'


@dataclass(frozen=True)
class RelocationResult:
    """Результат перемещения одного файла."""
    source: Path
    destination: Path
    action: str

    @property
    def relocated(self) -> bool:
        return self.action in (MOVED, COPIED)


class Relocator:
    """Единственный компонент, изменяющий файловую систему."""

    def __init__(self, logger: DateSorterLogger, dry_run: bool = False):
        """
        Инициализация.

        Args:
            logger: Логгер для записи операций
            dry_run: Только сообщать о перемещениях, ничего не меняя
        """
        self.logger = logger
        self.dry_run = dry_run

    def relocate(self, source_path: Path, dest_dir: Path) -> RelocationResult:
        """
        Перемещает файл в каталог назначения, создавая недостающие каталоги.

        Args:
            source_path: Путь к файлу
            dest_dir: Каталог назначения

        Returns:
            RelocationResult: Что было сделано с файлом

        Raises:
            FileOperationError: Если создать каталог, переместить,
                скопировать или удалить файл не удалось
        """
        source_path = Path(source_path)
        dest_dir = Path(dest_dir)
        dest_file_path = dest_dir / source_path.name

        if source_path == dest_file_path:
            self.logger.log_file_skipped(source_path)
            return RelocationResult(source_path, dest_file_path, SKIPPED)

        if self.dry_run:
            self.logger.log_file_planned(source_path, dest_file_path)
            return RelocationResult(source_path, dest_file_path, PLANNED)

        self.ensure_directory(dest_dir)

        self.logger.log_file_moved(source_path, dest_file_path)
        try:
            os.rename(source_path, dest_file_path)
            return RelocationResult(source_path, dest_file_path, MOVED)
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise FileOperationError(f"Не удалось переместить файл {source_path}: {e}")

        self.logger.log_cross_device(source_path)
        self._copy_then_delete(source_path, dest_file_path)
        return RelocationResult(source_path, dest_file_path, COPIED)

    def ensure_directory(self, directory: Path) -> None:
        """Создает каталог со всеми родительскими (если его еще нет)."""
        try:
            Path(directory).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(f"Не удалось создать директорию {directory}: {e}")

    def _copy_then_delete(self, source_path: Path, dest_file_path: Path) -> None:
        """
        Копирует файл и удаляет исходный только после успешного копирования.

        Частично скопированный файл при ошибке не удаляется.
        """
        try:
            shutil.copy2(source_path, dest_file_path, follow_symlinks=False)
        except OSError as e:
            raise FileOperationError(f"Не удалось скопировать файл {source_path}: {e}")

        try:
            os.remove(source_path)
        except OSError as e:
            raise FileOperationError(
                f"Не удалось удалить исходный файл {source_path} после копирования: {e}"
            )
