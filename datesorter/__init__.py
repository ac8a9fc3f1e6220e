"""
Date Sorter Utility

Утилита для раскладки файлов по каталогам вида ГГГГ / ММ - Месяц / ДД.
"""

__version__ = "1.0.0"
__author__ = "Date Sorter Team"
__description__ = "Utility for sorting files into a year/month/day directory tree"
