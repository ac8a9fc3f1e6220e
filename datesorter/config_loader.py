"""
Модуль для загрузки и валидации конфигурации приложения.

Файл конфигурации необязателен: все параметры имеют значения по умолчанию,
а файл (если указан) лишь переопределяет их.
"""

import configparser
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field

from .destination import MONTH_NAMES

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


@dataclass
class PathsConfig:
    """Конфигурация путей."""
    source_dir: Optional[Path] = None
    dest_dir: Optional[Path] = None


@dataclass
class SorterConfig:
    """Конфигурация параметров сортировки."""
    no_date_dir_name: str = "NoDate"
    locale: str = "en"
    follow_symlinks: bool = False
    dry_run: bool = False


@dataclass
class LoggingConfig:
    """Конфигурация логирования."""
    level: str = "INFO"
    log_file: Optional[Path] = None
    max_log_size: int = 10
    backup_count: int = 5


@dataclass
class Config:
    """Основная конфигурация приложения."""
    paths: PathsConfig = field(default_factory=PathsConfig)
    sorter: SorterConfig = field(default_factory=SorterConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """Класс для загрузки и валидации конфигурации."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Инициализация загрузчика конфигурации.

        Args:
            config_path: Путь к файлу конфигурации (None - только значения по умолчанию)
        """
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """
        Загружает конфигурацию из файла.

        Returns:
            Config: Объект конфигурации

        Raises:
            FileNotFoundError: Если указанный файл конфигурации не найден
            ValueError: Если конфигурация некорректна
        """
        config_parser = configparser.ConfigParser()

        if self.config_path is not None:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Файл конфигурации не найден: {self.config_path}")
            try:
                config_parser.read(self.config_path, encoding='utf-8')
            except configparser.Error as e:
                raise ValueError(f"Ошибка загрузки конфигурации: {e}")

        try:
            self._config = Config(
                paths=self._load_paths_config(config_parser),
                sorter=self._load_sorter_config(config_parser),
                logging=self._load_logging_config(config_parser)
            )

            self._validate_config()

            return self._config

        except Exception as e:
            self._config = None
            raise ValueError(f"Ошибка загрузки конфигурации: {e}")

    def _load_paths_config(self, parser: configparser.ConfigParser) -> PathsConfig:
        """Загружает конфигурацию путей."""
        section = 'paths'

        source_dir = parser.get(section, 'source_dir', fallback='')
        dest_dir = parser.get(section, 'dest_dir', fallback='')

        return PathsConfig(
            source_dir=Path(source_dir) if source_dir else None,
            dest_dir=Path(dest_dir) if dest_dir else None
        )

    def _load_sorter_config(self, parser: configparser.ConfigParser) -> SorterConfig:
        """Загружает конфигурацию сортировки."""
        section = 'sorter'

        return SorterConfig(
            no_date_dir_name=parser.get(section, 'no_date_dir_name', fallback='NoDate'),
            locale=parser.get(section, 'locale', fallback='en'),
            follow_symlinks=parser.getboolean(section, 'follow_symlinks', fallback=False),
            dry_run=parser.getboolean(section, 'dry_run', fallback=False)
        )

    def _load_logging_config(self, parser: configparser.ConfigParser) -> LoggingConfig:
        """Загружает конфигурацию логирования."""
        section = 'logging'

        log_file = parser.get(section, 'log_file', fallback='')

        return LoggingConfig(
            level=parser.get(section, 'level', fallback='INFO'),
            log_file=Path(log_file) if log_file else None,
            max_log_size=parser.getint(section, 'max_log_size', fallback=10),
            backup_count=parser.getint(section, 'backup_count', fallback=5)
        )

    def _validate_config(self) -> None:
        """Валидирует загруженную конфигурацию."""
        if not self._config:
            raise ValueError("Конфигурация не загружена")

        validate_config(self._config)

    def get_config(self) -> Config:
        """
        Возвращает загруженную конфигурацию.

        Returns:
            Config: Объект конфигурации

        Raises:
            ValueError: Если конфигурация не загружена
        """
        if self._config is None:
            raise ValueError("Конфигурация не загружена. Вызовите load_config() сначала.")
        return self._config

    def reload_config(self) -> Config:
        """
        Перезагружает конфигурацию из файла.

        Returns:
            Config: Обновленный объект конфигурации
        """
        self._config = None
        return self.load_config()


def validate_config(config: Config) -> None:
    """
    Проверяет значения конфигурации.

    Вызывается и после загрузки файла, и после переопределений из командной строки.

    Raises:
        ValueError: Если какой-либо параметр некорректен
    """
    name = config.sorter.no_date_dir_name
    if not name or name in ('.', '..') or Path(name).name != name:
        raise ValueError(f"Некорректное имя каталога для файлов без даты: {name!r}")

    if config.sorter.locale not in MONTH_NAMES:
        raise ValueError(f"Неизвестная локаль названий месяцев: {config.sorter.locale}")

    if config.logging.level.upper() not in VALID_LOG_LEVELS:
        raise ValueError(f"Некорректный уровень логирования: {config.logging.level}")

    if config.logging.max_log_size <= 0:
        raise ValueError("Размер файла лога должен быть больше 0")

    if config.logging.backup_count < 0:
        raise ValueError("Количество архивных логов не может быть отрицательным")


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Удобная функция для быстрой загрузки конфигурации.

    Args:
        config_path: Путь к файлу конфигурации (None - значения по умолчанию)

    Returns:
        Config: Объект конфигурации
    """
    loader = ConfigLoader(config_path)
    return loader.load_config()
