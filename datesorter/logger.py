"""
Модуль для настройки и управления логированием приложения.

Консольный вывод с цветными уровнями и необязательный файловый лог с ротацией.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List, Optional
from datetime import datetime

from .config_loader import LoggingConfig

LOGGER_NAME = 'date_sorter'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
CONSOLE_HANDLER_NAME = f"{LOGGER_NAME}.console"
FILE_HANDLER_NAME = f"{LOGGER_NAME}.file"


def own_handlers(logger: logging.Logger) -> List[logging.Handler]:
    """Обработчики, установленные DateSorterLogger."""
    return [
        h for h in logger.handlers
        if h.get_name() in (CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME)
    ]


class ColoredFormatter(logging.Formatter):
    """Форматтер с цветным выводом для консоли."""

    # Цветовые коды ANSI
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Форматирует запись лога с цветом."""
        # Запись общая для всех обработчиков, поэтому уровень подменяется на время форматирования
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


class DateSorterLogger:
    """Класс для управления логированием утилиты сортировки."""

    def __init__(self, config: LoggingConfig):
        """
        Инициализация логгера.

        Args:
            config: Конфигурация логирования
        """
        self.config = config
        self.logger: Optional[logging.Logger] = None
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Настраивает логгер с консольным и (при необходимости) файловым выводом."""
        level = getattr(logging, self.config.level.upper())

        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(level)

        # Очищаем обработчики, оставшиеся от предыдущей настройки
        self._remove_own_handlers()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.set_name(CONSOLE_HANDLER_NAME)
        console_handler.setFormatter(ColoredFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        console_handler.setLevel(level)
        self.logger.addHandler(console_handler)

        if self.config.log_file:
            log_file_path = Path(self.config.log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                filename=log_file_path,
                maxBytes=self.config.max_log_size * 1024 * 1024,  # МБ в байты
                backupCount=self.config.backup_count,
                encoding='utf-8'
            )
            file_handler.set_name(FILE_HANDLER_NAME)
            file_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            file_handler.setLevel(level)
            self.logger.addHandler(file_handler)

        # Предотвращаем дублирование сообщений
        self.logger.propagate = False

    def get_logger(self) -> logging.Logger:
        """
        Возвращает настроенный логгер.

        Returns:
            logging.Logger: Настроенный логгер
        """
        if self.logger is None:
            raise RuntimeError("Логгер не инициализирован")
        return self.logger

    def close(self) -> None:
        """Закрывает обработчики (освобождает файл лога)."""
        self._remove_own_handlers()

    def _remove_own_handlers(self) -> None:
        """Снимает только обработчики этого модуля; чужие обработчики логгера не трогаются."""
        for handler in own_handlers(self.logger):
            handler.close()
            self.logger.removeHandler(handler)

    def log_sort_start(self, source_dir: Path, dest_dir: Path, dry_run: bool = False) -> None:
        """
        Логирует начало сортировки.

        Args:
            source_dir: Исходный каталог
            dest_dir: Корень каталога назначения
            dry_run: Пробный запуск без изменений
        """
        self.logger.info("🚀 Начинаю сортировку" + (" (пробный запуск)" if dry_run else ""))
        self.logger.info(f"📂 Источник: {source_dir}")
        self.logger.info(f"📁 Назначение: {dest_dir}")
        self.logger.info(f"⏰ Время начала: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    def log_sort_end(self, processed: int, relocated: int, skipped: int, failed: int) -> None:
        """
        Логирует завершение сортировки.

        Args:
            processed: Обработано файлов
            relocated: Перемещено (включая копирование между дисками)
            skipped: Уже на своем месте
            failed: Ошибок
        """
        self.logger.info("✅ Сортировка завершена")
        self.logger.info(f"   • Обработано: {processed}")
        self.logger.info(f"   • Перемещено: {relocated}")
        self.logger.info(f"   • Уже на месте: {skipped}")
        self.logger.info(f"   • Ошибок: {failed}")

    def log_directory_scan(self, directory: Path) -> None:
        self.logger.info(f"🔍 Сканирую папку: {directory}")

    def log_directory_skipped(self, directory: Path, reason: str) -> None:
        self.logger.debug(f"⏭️ Папка пропущена ({reason}): {directory}")

    def log_directory_error(self, directory: Path, error: Exception) -> None:
        """
        Логирует ошибку чтения каталога.

        Args:
            directory: Каталог
            error: Исключение
        """
        self.logger.error(f"❌ Ошибка чтения директории {directory}: {error}")

    def log_file_moved(self, source_path: Path, target_path: Path) -> None:
        """
        Логирует успешное перемещение файла.

        Args:
            source_path: Исходный путь
            target_path: Целевой путь
        """
        self.logger.info(f"📁 Перемещение {source_path} → {target_path}")

    def log_file_planned(self, source_path: Path, target_path: Path) -> None:
        self.logger.info(f"📝 Будет перемещен: {source_path} → {target_path}")

    def log_cross_device(self, source_path: Path) -> None:
        self.logger.info(f"💽 Перемещение между разными дисками, использую копирование: {source_path}")

    def log_file_skipped(self, file_path: Path) -> None:
        self.logger.debug(f"✔️ Файл уже на своем месте: {file_path}")

    def log_no_date(self, file_path: Path, no_date_dir: Path) -> None:
        self.logger.warning(f"📅 Не удалось определить дату для файла: {file_path}. Перемещение в {no_date_dir}")

    def log_file_error(self, file_path: Path, error: Exception) -> None:
        """
        Логирует ошибку при обработке файла.

        Args:
            file_path: Путь к файлу
            error: Исключение
        """
        self.logger.error(f"❌ Ошибка при обработке файла {file_path}: {error}")

    def log_metadata_error(self, file_path: Path, error: Exception) -> None:
        self.logger.warning(f"⚠️ Не удалось прочитать метаданные {file_path}: {error}")

    def log_system_info(self, info: str) -> None:
        """
        Логирует системную информацию.

        Args:
            info: Информационное сообщение
        """
        self.logger.info(f"ℹ️ {info}")

    def log_warning(self, message: str) -> None:
        """
        Логирует предупреждение.

        Args:
            message: Сообщение предупреждения
        """
        self.logger.warning(f"⚠️ {message}")

    def log_critical_error(self, message: str, error: Exception = None) -> None:
        """
        Логирует критическую ошибку.

        Args:
            message: Сообщение об ошибке
            error: Исключение (опционально)
        """
        if error:
            self.logger.critical(f"💥 {message}: {error}")
        else:
            self.logger.critical(f"💥 {message}")


def setup_logger(config: LoggingConfig) -> logging.Logger:
    """
    Удобная функция для быстрой настройки логгера.

    Args:
        config: Конфигурация логирования

    Returns:
        logging.Logger: Настроенный логгер
    """
    sorter_logger = DateSorterLogger(config)
    return sorter_logger.get_logger()


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Получает логгер по имени.

    Args:
        name: Имя логгера

    Returns:
        logging.Logger: Логгер
    """
    return logging.getLogger(name)
