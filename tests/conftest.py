"""Pytest configuration and shared fixtures for cc-clean tests."""

import io

import pytest

import cc_clean.logging_setup
from cc_clean.rendering import OutputStyle, RenderOptions
from cc_clean.stream import StreamProcessor, make_console, make_err_console


class _Capture:
    """A StreamProcessor wired to in-memory consoles."""

    def __init__(self, style=OutputStyle.DEFAULT, verbose=False, show_line_numbers=False, force_terminal=None):
        if isinstance(style, str):
            style = OutputStyle(style)
        self.out = io.StringIO()
        self.err = io.StringIO()
        options = RenderOptions(style=style, verbose=verbose, show_line_numbers=show_line_numbers)
        self.processor = StreamProcessor(
            make_console(style, file=self.out, force_terminal=force_terminal),
            make_err_console(file=self.err),
            options,
        )

    def run(self, lines):
        return self.processor.process_stream(lines)

    @property
    def output(self) -> str:
        return self.out.getvalue()

    @property
    def errors(self) -> str:
        return self.err.getvalue()


@pytest.fixture
def capture():
    """Factory fixture: capture(style=..., verbose=...) -> _Capture."""
    return _Capture


@pytest.fixture
def tmp_settings(tmp_path, monkeypatch):
    """Redirect settings file to a temp directory."""
    settings_file = tmp_path / "settings.json"
    monkeypatch.setattr("cc_clean.settings.get_config_path", lambda: settings_file)
    monkeypatch.delenv("CC_CLEAN_STYLE", raising=False)
    return settings_file


@pytest.fixture(autouse=True)
def _reset_logging():
    """Each test starts with unconfigured logging."""
    cc_clean.logging_setup.reset()
    yield
    cc_clean.logging_setup.reset()
