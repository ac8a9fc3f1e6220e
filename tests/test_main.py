"""
Тесты для модуля main.py
"""

import argparse
import logging
import shutil
import tempfile
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from datesorter.errors import SortError
from datesorter.logger import LOGGER_NAME
from datesorter.main import DateSorterCLI, create_parser, main, prompt_for_path


@pytest.fixture(autouse=True)
def release_log_handlers():
    """Закрывает обработчики логгера после каждого теста."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture
def temp_dir():
    """Создает временную директорию для тестов."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path).resolve()
    shutil.rmtree(temp_path, ignore_errors=True)


class TestPromptForPath:
    """Тесты интерактивного ввода пути."""

    def test_strips_whitespace(self):
        input_func = Mock(return_value="  /data/in \n")

        assert prompt_for_path("Путь:", input_func) == Path("/data/in")
        input_func.assert_called_once_with("Путь: ")

    def test_empty_answer(self):
        with pytest.raises(SortError, match="Путь не указан"):
            prompt_for_path("Путь:", Mock(return_value="   "))


class TestCreateParser:
    """Тесты парсера аргументов."""

    def test_defaults(self):
        args = create_parser().parse_args([])

        assert args.source is None
        assert args.destination is None
        assert args.config is None
        assert args.dry_run is False
        assert args.follow_symlinks is False
        assert args.verbose is False

    def test_all_options(self):
        args = create_parser().parse_args([
            "in", "out", "--config", "settings.ini", "--locale", "ru",
            "--no-date-name", "Без Даты", "--dry-run", "--follow-symlinks",
            "--log-file", "sorter.log", "-v"
        ])

        assert args.source == "in"
        assert args.destination == "out"
        assert args.config == "settings.ini"
        assert args.locale == "ru"
        assert args.no_date_name == "Без Даты"
        assert args.dry_run is True
        assert args.follow_symlinks is True
        assert args.log_file == "sorter.log"
        assert args.verbose is True


class TestDateSorterCLI:
    """Тесты для класса DateSorterCLI."""

    def parse(self, *argv):
        return create_parser().parse_args(list(argv))

    def test_setup_applies_overrides(self):
        """Аргументы переопределяют значения конфигурации."""
        cli = DateSorterCLI()

        assert cli.setup(self.parse("--locale", "ru", "--no-date-name", "Без Даты", "--dry-run", "-v")) is True
        assert cli.config.sorter.locale == "ru"
        assert cli.config.sorter.no_date_dir_name == "Без Даты"
        assert cli.config.sorter.dry_run is True
        assert cli.config.logging.level == "DEBUG"
        assert cli.logger is not None

    def test_setup_invalid_override(self, capsys):
        """Некорректное значение из командной строки отклоняется."""
        cli = DateSorterCLI()

        assert cli.setup(self.parse("--locale", "xx")) is False
        assert "Ошибка инициализации" in capsys.readouterr().out

    def test_setup_missing_config(self):
        cli = DateSorterCLI()

        assert cli.setup(self.parse("--config", "nonexistent_config.ini")) is False
        assert cli.logger is None

    def test_resolve_paths_prompts_for_missing(self, temp_dir):
        """Недостающие пути запрашиваются интерактивно."""
        answers = iter([str(temp_dir), "/data/out"])
        cli = DateSorterCLI(input_func=lambda prompt: next(answers))
        args = self.parse()
        cli.setup(args)

        cli.resolve_paths(args)

        assert cli.config.paths.source_dir == temp_dir
        assert cli.config.paths.dest_dir == Path("/data/out")

    def test_resolve_paths_invalid_source_before_destination(self, temp_dir):
        """Неверный источник отклоняется сразу, папка назначения не запрашивается."""
        input_func = Mock(return_value=str(temp_dir / "missing"))
        cli = DateSorterCLI(input_func=input_func)
        args = self.parse()
        cli.setup(args)

        with pytest.raises(SortError, match="не существует"):
            cli.resolve_paths(args)

        input_func.assert_called_once()
        assert cli.config.paths.dest_dir is None

    def test_resolve_paths_arguments_win(self, temp_dir):
        input_func = Mock()
        cli = DateSorterCLI(input_func=input_func)
        args = self.parse(str(temp_dir), "/data/out")
        cli.setup(args)

        cli.resolve_paths(args)

        assert cli.config.paths.source_dir == temp_dir
        input_func.assert_not_called()

    @patch('datesorter.main.create_sorter')
    def test_cmd_sort_per_file_errors_exit_zero(self, mock_create_sorter, temp_dir, capsys):
        """Ошибки отдельных файлов не влияют на код возврата."""
        stats = Mock(
            directories_scanned=1, processed_files=3, moved_files=1, copied_files=0,
            skipped_files=0, planned_files=0, no_date_files=0, failed_files=2,
            directory_errors=0,
            errors=[{'path': '/in/a', 'error': 'boom'}, {'path': '/in/b', 'error': 'bang'}]
        )
        mock_create_sorter.return_value.run.return_value = stats
        cli = DateSorterCLI()
        args = self.parse(str(temp_dir), "/data/out")
        cli.setup(args)

        assert cli.cmd_sort(args) == 0
        out = capsys.readouterr().out
        assert "Обнаружено 2 ошибок" in out
        assert "/in/a: boom" in out

    @patch('datesorter.main.create_sorter')
    def test_cmd_sort_fatal(self, mock_create_sorter, temp_dir, capsys):
        mock_create_sorter.return_value.run.side_effect = SortError("нет папки")
        cli = DateSorterCLI()
        args = self.parse(str(temp_dir), "/data/out")
        cli.setup(args)

        assert cli.cmd_sort(args) == 1
        assert "нет папки" in capsys.readouterr().out

    @patch('datesorter.main.create_sorter')
    def test_cmd_sort_invalid_source(self, mock_create_sorter, temp_dir, capsys):
        cli = DateSorterCLI()
        args = self.parse(str(temp_dir / "missing"), "/data/out")
        cli.setup(args)

        assert cli.cmd_sort(args) == 1
        mock_create_sorter.assert_not_called()
        assert "не существует" in capsys.readouterr().out


class TestMain:
    """Сквозные тесты CLI."""

    def test_main_sorts_files(self, temp_dir):
        source = temp_dir / "in"
        source.mkdir()
        (source / "IMG_20230615_beach.jpg").write_text("beach")
        dest = temp_dir / "out"

        assert main([str(source), str(dest)]) == 0
        assert (dest / "2023" / "06 - June" / "15" / "IMG_20230615_beach.jpg").exists()
        assert (dest / "NoDate").is_dir()

    def test_main_invalid_source(self, temp_dir):
        """Несуществующий источник: ненулевой код и никаких каталогов."""
        dest = temp_dir / "out"

        assert main([str(temp_dir / "missing"), str(dest)]) == 1
        assert not dest.exists()

    def test_main_bad_config(self):
        assert main(["--config", "nonexistent_config.ini", "a", "b"]) == 1

    def test_main_interactive(self, temp_dir):
        source = temp_dir / "in"
        source.mkdir()
        (source / "2024-03-07.txt").write_text("x")
        dest = temp_dir / "out"

        with patch('builtins.input', side_effect=[str(source), str(dest)]):
            assert main(["--locale", "ru"]) == 0

        assert (dest / "2024" / "03 - марта" / "07" / "2024-03-07.txt").exists()

    def test_main_empty_prompt(self):
        with patch('builtins.input', return_value=""):
            assert main([]) == 1

    def test_main_keyboard_interrupt(self, capsys):
        with patch('builtins.input', side_effect=KeyboardInterrupt):
            assert main([]) == 1
        assert "прервана" in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
