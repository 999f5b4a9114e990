"""Unit tests for CLI utilities including ErrorFormatter."""

import logging

import pytest

from tako.cli_utils import ErrorFormatter, PathValidator, setup_logging


class TestErrorFormatter:
    """Tests for ErrorFormatter class."""

    def test_print_error_goes_to_stderr(self, capsys):
        ErrorFormatter.print_error("boom")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "✗ Error:" in captured.err
        assert "boom" in captured.err

    def test_print_success_goes_to_stdout(self, capsys):
        ErrorFormatter.print_success("done")

        captured = capsys.readouterr()
        assert "✓ done" in captured.out
        assert captured.err == ""

    def test_print_warning(self, capsys):
        ErrorFormatter.print_warning("line one\nline two")

        err = capsys.readouterr().err
        assert "Warning:" in err
        assert "line two" in err

    def test_print_step(self, capsys):
        ErrorFormatter.print_step("Building", "TAKO contract...")
        out = capsys.readouterr().out
        assert out.startswith(ErrorFormatter.GREEN + "Building")
        assert "TAKO contract..." in out

    def test_handle_file_not_found(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            ErrorFormatter.handle_file_not_found(FileNotFoundError("Cargo.toml"))

        assert exc_info.value.code == 1
        assert "File not found" in capsys.readouterr().err

    def test_handle_permission_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            ErrorFormatter.handle_permission_error(PermissionError("target"))

        assert exc_info.value.code == 1
        assert "Permission denied" in capsys.readouterr().err

    def test_handle_keyboard_interrupt(self):
        with pytest.raises(SystemExit) as exc_info:
            ErrorFormatter.handle_keyboard_interrupt()
        assert exc_info.value.code == 130

    def test_handle_unexpected_error_verbose(self, capsys):
        try:
            raise ValueError("bad value")
        except ValueError as e:
            with pytest.raises(SystemExit) as exc_info:
                ErrorFormatter.handle_unexpected_error(e, verbose=True)

        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "ValueError: bad value" in err
        assert "Traceback" in err


class TestPathValidator:
    """Tests for PathValidator."""

    def test_valid_directory(self, tmp_path):
        PathValidator.validate_project_dir(tmp_path)

    def test_missing_directory(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            PathValidator.validate_project_dir(tmp_path / "missing")
        assert exc_info.value.code == 2

    def test_file_is_not_directory(self, tmp_path):
        path = tmp_path / "file"
        path.write_text("")

        with pytest.raises(SystemExit) as exc_info:
            PathValidator.validate_project_dir(path)
        assert exc_info.value.code == 2


class TestSetupLogging:
    """Tests for setup_logging()."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        level, handlers = root.level, list(root.handlers)
        yield
        root.setLevel(level)
        root.handlers[:] = handlers

    def test_quiet_by_default(self):
        setup_logging(False)
        assert logging.getLogger().level == logging.WARNING

    def test_verbose(self):
        setup_logging(True)
        assert logging.getLogger().level == logging.DEBUG
