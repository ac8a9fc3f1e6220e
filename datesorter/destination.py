"""
Модуль построения каталога назначения по дате.

Структура: <корень>/<ГГГГ>/<ММ - Месяц>/<ДД>. Файлы без даты
попадают в отдельный каталог рядом с датированными.
"""

from pathlib import Path
from typing import Dict, Optional, Tuple

from .date_extractor import CalendarDate

MONTH_NAMES: Dict[str, Tuple[str, ...]] = {
    'en': (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
    'ru': (
        "января", "февраля", "марта", "апреля", "мая", "июня",
        "июля", "августа", "сентября", "октября", "ноября", "декабря",
    ),
}

UNKNOWN_MONTH: Dict[str, str] = {
    'en': "Unknown",
    'ru': "неизвестный месяц",
}


def month_name(month: int, locale: str = 'en') -> str:
    """
    Возвращает название месяца для локали.

    Args:
        month: Номер месяца (1-12)
        locale: Ключ таблицы MONTH_NAMES

    Returns:
        str: Название месяца или заглушка для номера вне диапазона

    Raises:
        KeyError: Если таблица для локали не зарегистрирована
    """
    names = MONTH_NAMES[locale]
    if 1 <= month <= len(names):
        return names[month - 1]
    return UNKNOWN_MONTH.get(locale, UNKNOWN_MONTH['en'])


class DestinationResolver:
    """Вычисляет каталог назначения; сам ничего не создает."""

    def __init__(self, dest_root: Path, no_date_dir: Path, locale: str = 'en'):
        """
        Инициализация.

        Args:
            dest_root: Корень дерева по датам
            no_date_dir: Каталог для файлов без даты
            locale: Локаль названий месяцев
        """
        if locale not in MONTH_NAMES:
            raise ValueError(f"Неизвестная локаль названий месяцев: {locale}")
        self.dest_root = Path(dest_root)
        self.no_date_dir = Path(no_date_dir)
        self.locale = locale

    def month_folder(self, month: int) -> str:
        return f"{month:02d} - {month_name(month, self.locale)}"

    def resolve(self, date: Optional[CalendarDate]) -> Path:
        """
        Получает каталог назначения для даты.

        Args:
            date: Дата файла или None

        Returns:
            Path: Каталог по дате либо каталог для файлов без даты
        """
        if date is None:
            return self.no_date_dir
        return (
            self.dest_root
            / f"{date.year:04d}"
            / self.month_folder(date.month)
            / f"{date.day:02d}"
        )

    def target_file(self, date: Optional[CalendarDate], filename: str) -> Path:
        return self.resolve(date) / filename
