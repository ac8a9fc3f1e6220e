"""
Исключения утилиты сортировки.
"""


class DateSorterError(Exception):
    """Базовое исключение проекта."""
    pass


class InvalidDateError(DateSorterError, ValueError):
    """Тройка (год, месяц, день) не является корректной датой."""
    pass


class FileOperationError(DateSorterError):
    """Исключение для ошибок операций с файлами."""
    pass


class SortError(DateSorterError):
    """Фатальная ошибка подготовки к сортировке."""
    pass
