"""
Модуль бизнес-логики сортировки файлов.

Обходит исходное дерево и для каждого файла определяет дату (по имени,
затем по метаданным), вычисляет каталог назначения и перемещает файл.
"""

import os
from typing import Dict, List, Optional, Set
from datetime import datetime
from pathlib import Path

from .config_loader import Config
from .date_extractor import CalendarDate, DateExtractor
from .destination import DestinationResolver
from .errors import FileOperationError, SortError
from .file_ops import COPIED, MOVED, PLANNED, SKIPPED, RelocationResult, Relocator
from .fs_date import FilesystemDateFallback
from .logger import DateSorterLogger


class SortStats:
    """Класс для хранения статистики сортировки."""

    def __init__(self):
        self.directories_scanned = 0
        self.directory_errors = 0
        self.processed_files = 0
        self.moved_files = 0
        self.copied_files = 0
        self.skipped_files = 0
        self.planned_files = 0
        self.failed_files = 0
        self.dated_by_name = 0
        self.dated_by_filesystem = 0
        self.no_date_files = 0
        self.start_time = None
        self.end_time = None
        self.errors = []

    def add_error(self, path: Path, error: Exception):
        """Добавляет ошибку в список."""
        self.errors.append({
            'path': str(path),
            'error': str(error),
            'timestamp': datetime.now()
        })

    def record(self, result: RelocationResult) -> None:
        """Учитывает результат перемещения файла."""
        if result.action == MOVED:
            self.moved_files += 1
        elif result.action == COPIED:
            self.copied_files += 1
        elif result.action == SKIPPED:
            self.skipped_files += 1
        elif result.action == PLANNED:
            self.planned_files += 1

    @property
    def relocated_files(self) -> int:
        return self.moved_files + self.copied_files

    def get_duration(self) -> Optional[float]:
        """Возвращает продолжительность сортировки в секундах."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def to_dict(self) -> Dict:
        """Преобразует статистику в словарь."""
        return {
            'directories_scanned': self.directories_scanned,
            'directory_errors': self.directory_errors,
            'processed_files': self.processed_files,
            'moved_files': self.moved_files,
            'copied_files': self.copied_files,
            'skipped_files': self.skipped_files,
            'planned_files': self.planned_files,
            'failed_files': self.failed_files,
            'dated_by_name': self.dated_by_name,
            'dated_by_filesystem': self.dated_by_filesystem,
            'no_date_files': self.no_date_files,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'duration_seconds': self.get_duration(),
            'error_count': len(self.errors)
        }


class Sorter:
    """Основной класс для сортировки файлов по датам."""

    def __init__(self, config: Config, logger: DateSorterLogger,
                 extractor: Optional[DateExtractor] = None,
                 fallback: Optional[FilesystemDateFallback] = None):
        """
        Инициализация сортировщика.

        Args:
            config: Конфигурация приложения
            logger: Логгер для записи операций
            extractor: Извлечение даты из имени (по умолчанию стандартные шаблоны)
            fallback: Дата по метаданным (по умолчанию время создания/изменения)

        Raises:
            SortError: Если исходный каталог или каталог назначения не заданы
        """
        if config.paths.source_dir is None or config.paths.dest_dir is None:
            raise SortError("Не заданы исходный каталог и каталог назначения")

        self.config = config
        self.logger = logger
        self.source_dir = absolute_path(config.paths.source_dir)
        self.dest_dir = absolute_path(config.paths.dest_dir)
        self.no_date_dir = self.dest_dir / config.sorter.no_date_dir_name
        self.follow_symlinks = config.sorter.follow_symlinks
        self.dry_run = config.sorter.dry_run

        self.extractor = extractor or DateExtractor()
        self.fallback = fallback or FilesystemDateFallback(logger=logger)
        self.resolver = DestinationResolver(self.dest_dir, self.no_date_dir, config.sorter.locale)
        self.relocator = Relocator(logger, dry_run=self.dry_run)
        self.stats = SortStats()

    def prepare(self) -> None:
        """
        Проверяет исходный каталог и создает каталоги назначения.

        Raises:
            SortError: Если сортировку начинать нельзя
        """
        if not self.source_dir.is_dir():
            raise SortError(
                f"Указанный исходный путь не существует или не является папкой: {self.source_dir}"
            )

        if self.dest_dir != self.source_dir and self.source_dir in self.dest_dir.parents:
            self.logger.log_warning(
                f"Папка назначения {self.dest_dir} находится внутри исходной и не будет просматриваться"
            )

        if self.dry_run:
            self.logger.log_system_info("Пробный запуск: каталоги назначения не создаются")
            return

        for directory in (self.dest_dir, self.no_date_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise SortError(f"Не удалось создать папку {directory}: {e}")

    def run(self) -> SortStats:
        """
        Выполняет полную сортировку.

        Ошибки отдельных файлов и каталогов не прерывают работу.

        Returns:
            SortStats: Статистика сортировки

        Raises:
            SortError: Если подготовка к сортировке не удалась
        """
        self.stats = SortStats()
        self.stats.start_time = datetime.now()
        self.logger.log_sort_start(self.source_dir, self.dest_dir, self.dry_run)

        try:
            self.prepare()
        except SortError as e:
            self.logger.log_critical_error("Сортировка не начата", e)
            raise

        self.traverse(self.source_dir)

        self.stats.end_time = datetime.now()
        self.logger.log_sort_end(
            self.stats.processed_files,
            self.stats.relocated_files,
            self.stats.skipped_files,
            self.stats.failed_files
        )
        return self.stats

    def is_excluded(self, directory: Path) -> bool:
        """Каталог назначения и каталог без даты не обходятся."""
        return directory == self.dest_dir or directory == self.no_date_dir

    def traverse(self, current_dir: Path) -> None:
        """
        Обходит дерево каталогов в глубину, используя явный стек.

        Args:
            current_dir: Каталог, с которого начинается обход
        """
        current_dir = Path(current_dir)
        visited: Set[Path] = set()
        excluded_real = {self.dest_dir.resolve(), self.no_date_dir.resolve()}
        if self.follow_symlinks:
            visited.add(current_dir.resolve())

        stack: List[Path] = [current_dir]
        while stack:
            directory = stack.pop()
            self.logger.log_directory_scan(directory)

            try:
                with os.scandir(directory) as it:
                    entries = list(it)
            except OSError as e:
                self.logger.log_directory_error(directory, e)
                self.stats.directory_errors += 1
                self.stats.add_error(directory, e)
                continue

            self.stats.directories_scanned += 1
            subdirs: List[Path] = []

            for entry in entries:
                path = directory / entry.name
                try:
                    is_link = entry.is_symlink()
                    is_dir = entry.is_dir()
                    is_file = entry.is_file()
                except OSError as e:
                    self.logger.log_file_error(path, e)
                    self.stats.add_error(path, e)
                    continue

                if is_dir:
                    if self.is_excluded(path):
                        self.logger.log_directory_skipped(path, "каталог назначения")
                        continue
                    if is_link and not self.follow_symlinks:
                        self.logger.log_directory_skipped(path, "символическая ссылка")
                        continue
                    if self.follow_symlinks:
                        real = path.resolve()
                        if real in excluded_real:
                            self.logger.log_directory_skipped(path, "каталог назначения")
                            continue
                        if real in visited:
                            self.logger.log_directory_skipped(path, "уже просмотрен")
                            continue
                        visited.add(real)
                    subdirs.append(path)
                elif is_file:
                    self.process_file(path)

            # reversed: подкаталоги обходятся в порядке листинга
            stack.extend(reversed(subdirs))

    def resolve_date(self, file_path: Path) -> Optional[CalendarDate]:
        """
        Определяет дату файла: сначала по имени, затем по метаданным.

        Args:
            file_path: Путь к файлу

        Returns:
            CalendarDate или None
        """
        date = self.extractor.extract(file_path.name)
        if date is not None:
            self.stats.dated_by_name += 1
            return date

        date = self.fallback.resolve(file_path)
        if date is not None:
            self.stats.dated_by_filesystem += 1
        return date

    def process_file(self, file_path: Path) -> Optional[RelocationResult]:
        """
        Обрабатывает один файл.

        Args:
            file_path: Путь к файлу

        Returns:
            RelocationResult или None, если файл переместить не удалось
        """
        file_path = Path(file_path)
        self.stats.processed_files += 1

        date = self.resolve_date(file_path)
        target_dir = self.resolver.resolve(date)

        try:
            result = self.relocator.relocate(file_path, target_dir)
        except FileOperationError as e:
            self.stats.failed_files += 1
            self.stats.add_error(file_path, e)
            self.logger.log_file_error(file_path, e)
            return None

        # Файл без даты учитывается, только если он действительно в каталоге без даты
        if date is None:
            self.stats.no_date_files += 1
            self.logger.log_no_date(file_path, target_dir)

        self.stats.record(result)
        return result


def absolute_path(path: Path) -> Path:
    """Абсолютный нормализованный путь (с раскрытием ~ и символических ссылок)."""
    return Path(path).expanduser().resolve()


def create_sorter(config: Config, logger: DateSorterLogger) -> Sorter:
    """
    Удобная функция для создания сортировщика.

    Args:
        config: Конфигурация приложения
        logger: Логгер

    Returns:
        Sorter: Сортировщик
    """
    return Sorter(config, logger)
