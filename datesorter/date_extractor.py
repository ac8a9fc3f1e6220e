"""
Модуль извлечения даты из имени файла.

Имя файла проверяется набором шаблонов в фиксированном порядке приоритета;
побеждает первый шаблон, совпадение которого дает корректную календарную дату.
"""

import re
from dataclasses import dataclass
from datetime import date
from pathlib import PurePath
from typing import Optional, Sequence, Tuple, Union

from .errors import InvalidDateError


@dataclass(frozen=True, order=True)
class CalendarDate:
    """Календарная дата (год, месяц, день), всегда корректная."""
    year: int
    month: int
    day: int

    def __post_init__(self):
        try:
            date(self.year, self.month, self.day)
        except (TypeError, ValueError) as e:
            raise InvalidDateError(
                f"Некорректная дата {self.year}-{self.month}-{self.day}: {e}"
            )

    @classmethod
    def from_ymd(cls, year: int, month: int, day: int) -> "CalendarDate":
        """
        Создает дату с проверкой по правилам григорианского календаря.

        Raises:
            InvalidDateError: Если тройка не образует дату (месяц 13, 30 февраля и т.п.)
        """
        return cls(year, month, day)

    @classmethod
    def from_date(cls, value: date) -> "CalendarDate":
        return cls(value.year, value.month, value.day)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def __str__(self) -> str:
        return self.isoformat()


@dataclass(frozen=True)
class DatePattern:
    """Правило поиска даты: группы 1, 2, 3 содержат год, месяц и день."""
    name: str
    regex: re.Pattern

    @classmethod
    def compile(cls, name: str, expression: str) -> "DatePattern":
        return cls(name=name, regex=re.compile(expression, re.ASCII))


# Порядок важен: шаблон с разделителями проверяется первым.
DEFAULT_PATTERNS: Tuple[DatePattern, ...] = (
    DatePattern.compile("separated", r"((?:19|20)\d{2})[-_.](\d{2})[-_.](\d{2})"),
    DatePattern.compile("compact", r"((?:19|20)\d{2})(\d{2})(\d{2})"),
)


class DateExtractor:
    """Извлекает дату из имени файла по упорядоченному списку шаблонов."""

    def __init__(self, patterns: Sequence[DatePattern] = DEFAULT_PATTERNS):
        """
        Инициализация экстрактора.

        Args:
            patterns: Шаблоны в порядке убывания приоритета
        """
        self.patterns = tuple(patterns)

    def extract(self, filename: Union[str, PurePath]) -> Optional[CalendarDate]:
        """
        Ищет дату в имени файла.

        Каталоги в пути не просматриваются: если передан путь,
        используется только его последний компонент.

        Args:
            filename: Имя файла или путь к нему

        Returns:
            CalendarDate или None: Первая корректная дата либо None
        """
        name = PurePath(filename).name

        for pattern in self.patterns:
            found = self._match(pattern, name)
            if found is not None:
                return found
        return None

    @staticmethod
    def _match(pattern: DatePattern, name: str) -> Optional[CalendarDate]:
        """Проверяет первое (самое левое) совпадение одного шаблона."""
        match = pattern.regex.search(name)
        if match is None:
            return None

        try:
            year, month, day = (int(group) for group in match.group(1, 2, 3))
        except (TypeError, ValueError):
            return None

        try:
            return CalendarDate.from_ymd(year, month, day)
        except InvalidDateError:
            return None


def extract_date(filename: Union[str, PurePath]) -> Optional[CalendarDate]:
    """
    Удобная функция для извлечения даты шаблонами по умолчанию.

    Args:
        filename: Имя файла или путь к нему

    Returns:
        CalendarDate или None
    """
    return DateExtractor().extract(filename)
