"""
Главный модуль CLI интерфейса утилиты сортировки файлов по датам.

Пути к исходной папке и папке назначения берутся из аргументов,
а если не указаны, запрашиваются интерактивно.
"""

import argparse
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from .config_loader import Config, load_config, validate_config
from .errors import SortError
from .logger import DateSorterLogger
from .sorter import Sorter, create_sorter


def prompt_for_path(prompt_text: str, input_func: Optional[Callable[[str], str]] = None) -> Path:
    """
    Запрашивает путь у пользователя.

    Args:
        prompt_text: Текст приглашения
        input_func: Функция ввода (для тестов)

    Returns:
        Path: Введенный путь (пробелы по краям отброшены)

    Raises:
        SortError: Если введена пустая строка
    """
    answer = (input_func or input)(f"{prompt_text} ").strip()
    if not answer:
        raise SortError("Путь не указан")
    return Path(answer)


class DateSorterCLI:
    """Класс для обработки команд CLI."""

    def __init__(self, input_func: Optional[Callable[[str], str]] = None):
        self.config: Optional[Config] = None
        self.logger: Optional[DateSorterLogger] = None
        self.sorter: Optional[Sorter] = None
        self.input_func = input_func or input

    def setup(self, args) -> bool:
        """
        Инициализирует CLI: конфигурация, переопределения из аргументов, логгер.

        Args:
            args: Аргументы командной строки

        Returns:
            bool: True если инициализация успешна
        """
        try:
            self.config = load_config(args.config)
            self.apply_overrides(args)
            validate_config(self.config)

            self.logger = DateSorterLogger(self.config.logging)

            if args.config:
                self.logger.log_system_info(f"Конфигурация загружена из: {args.config}")
            return True

        except Exception as e:
            print(f"❌ Ошибка инициализации: {e}")
            return False

    def apply_overrides(self, args) -> None:
        """Аргументы командной строки имеют приоритет над файлом конфигурации."""
        if args.no_date_name:
            self.config.sorter.no_date_dir_name = args.no_date_name
        if args.locale:
            self.config.sorter.locale = args.locale
        if args.dry_run:
            self.config.sorter.dry_run = True
        if args.follow_symlinks:
            self.config.sorter.follow_symlinks = True
        if args.log_file:
            self.config.logging.log_file = Path(args.log_file)
        if args.verbose:
            self.config.logging.level = 'DEBUG'

    def resolve_paths(self, args) -> None:
        """
        Определяет исходную папку и папку назначения.

        Порядок: аргументы командной строки, файл конфигурации, интерактивный ввод.

        Raises:
            SortError: Если путь не указан или исходная папка не существует
        """
        paths = self.config.paths
        if args.source:
            paths.source_dir = Path(args.source)
        if args.destination:
            paths.dest_dir = Path(args.destination)

        if paths.source_dir is None:
            paths.source_dir = prompt_for_path(
                "Введите путь к папке с файлами для сортировки:", self.input_func
            )
        # Неверный источник отклоняется до вопроса о папке назначения
        if not paths.source_dir.expanduser().is_dir():
            raise SortError(
                f"Указанный исходный путь не существует или не является папкой: {paths.source_dir}"
            )
        if paths.dest_dir is None:
            paths.dest_dir = prompt_for_path(
                "Введите путь к папке, куда будут перемещены файлы:", self.input_func
            )

    def cmd_sort(self, args) -> int:
        """
        Команда сортировки.

        Args:
            args: Аргументы командной строки

        Returns:
            int: Код возврата (0 - сортировка выполнена, 1 - не удалось начать)
        """
        try:
            self.resolve_paths(args)
            self.sorter = create_sorter(self.config, self.logger)
            stats = self.sorter.run()

        except SortError as e:
            print(f"❌ Ошибка: {e}")
            return 1

        print("\n✅ Сортировка успешно завершена!")
        print("📊 Статистика:")
        print(f"   • Папок просмотрено: {stats.directories_scanned}")
        print(f"   • Файлов обработано: {stats.processed_files}")
        print(f"   • Перемещено: {stats.moved_files}")
        print(f"   • Скопировано между дисками: {stats.copied_files}")
        print(f"   • Уже на своем месте: {stats.skipped_files}")
        if stats.planned_files:
            print(f"   • Запланировано (пробный запуск): {stats.planned_files}")
        print(f"   • Без даты: {stats.no_date_files}")
        print(f"   • Ошибок: {stats.failed_files + stats.directory_errors}")

        if stats.errors:
            print(f"\n⚠️ Обнаружено {len(stats.errors)} ошибок:")
            for error in stats.errors[:10]:  # Показываем первые 10 ошибок
                print(f"   • {error['path']}: {error['error']}")
            if len(stats.errors) > 10:
                print(f"   ... и еще {len(stats.errors) - 10} ошибок")

        # Ошибки отдельных файлов не влияют на код возврата
        return 0


def create_parser() -> argparse.ArgumentParser:
    """
    Создает парсер аргументов командной строки.

    Returns:
        argparse.ArgumentParser: Настроенный парсер
    """
    parser = argparse.ArgumentParser(
        prog='datesorter',
        description="Утилита сортировки файлов по папкам ГГГГ / ММ - Месяц / ДД",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры использования:

  # Пути будут запрошены интерактивно
  datesorter

  # Сортировка из ~/Downloads в ~/Sorted
  datesorter ~/Downloads ~/Sorted

  # Пробный запуск с русскими названиями месяцев
  datesorter ~/Photos ~/Photos/sorted --locale ru --dry-run

  # Параметры из файла конфигурации
  datesorter --config config/settings.ini
        """
    )

    parser.add_argument('source', nargs='?', help='Папка с файлами для сортировки')
    parser.add_argument('destination', nargs='?', help='Папка, куда будут перемещены файлы')
    parser.add_argument(
        '--config',
        default=None,
        help='Путь к файлу конфигурации (по умолчанию не используется)'
    )
    parser.add_argument('--locale', help='Язык названий месяцев (en, ru)')
    parser.add_argument('--no-date-name', help='Имя папки для файлов без даты (по умолчанию: NoDate)')
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Показать перемещения, ничего не меняя'
    )
    parser.add_argument(
        '--follow-symlinks',
        action='store_true',
        help='Заходить в папки по символическим ссылкам'
    )
    parser.add_argument('--log-file', help='Файл лога (с ротацией)')
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Подробный вывод'
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Главная функция CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    cli = DateSorterCLI()

    if not cli.setup(args):
        return 1

    try:
        return cli.cmd_sort(args)
    except KeyboardInterrupt:
        print("\n⚠️ Операция прервана пользователем")
        return 1
    except EOFError:
        print("\n❌ Не удалось прочитать путь")
        return 1
    finally:
        cli.logger.close()


if __name__ == "__main__":
    sys.exit(main())
