"""
Модуль определения даты файла по метаданным файловой системы.

Используется, когда в имени файла дата не найдена.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from .date_extractor import CalendarDate

TimestampFunc = Callable[[Path], Optional[float]]


def file_timestamp(path: Union[str, Path]) -> Optional[float]:
    """
    Возвращает время создания файла, а если платформа его не хранит,
    время последнего изменения.

    На Windows до Python 3.12 время создания хранится в st_ctime.

    Raises:
        OSError: Если метаданные прочитать не удалось
    """
    st = os.stat(path)
    birthtime = getattr(st, "st_birthtime", None)
    if birthtime is not None:
        return birthtime
    if os.name == 'nt':
        return getattr(st, "st_ctime", None)
    return getattr(st, "st_mtime", None)


class FilesystemDateFallback:
    """Дата файла по времени создания (или изменения) в локальной зоне."""

    def __init__(self, timestamp_func: Optional[TimestampFunc] = None, logger=None):
        """
        Args:
            timestamp_func: Источник отметки времени (по умолчанию file_timestamp)
            logger: DateSorterLogger для записи ошибок чтения метаданных
        """
        self.timestamp_func = timestamp_func or file_timestamp
        self.logger = logger

    def resolve(self, path: Union[str, Path]) -> Optional[CalendarDate]:
        """
        Определяет дату файла.

        Ошибка чтения метаданных не отличается от отсутствия даты:
        в обоих случаях возвращается None.

        Args:
            path: Путь к файлу

        Returns:
            CalendarDate или None
        """
        try:
            timestamp = self.timestamp_func(Path(path))
        except OSError as e:
            if self.logger is not None:
                self.logger.log_metadata_error(Path(path), e)
            return None

        if timestamp is None:
            return None

        try:
            # fromtimestamp без tz дает локальное время системы
            return CalendarDate.from_date(datetime.fromtimestamp(timestamp).date())
        except (OverflowError, OSError, ValueError) as e:
            if self.logger is not None:
                self.logger.log_metadata_error(Path(path), e)
            return None
