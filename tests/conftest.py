import os

import pytest


class FakePrinter:
    """Records ESC/POS calls instead of talking to hardware."""

    def __init__(self, profile=None):
        self.calls = []
        self.profile = profile
        self.closed = False

    def hw(self, hw):
        self.calls.append(("hw", hw))

    def set(self, **kwargs):
        self.calls.append(("set", kwargs))

    def text(self, txt):
        self.calls.append(("text", txt))

    def barcode(self, code, bc, **kwargs):
        self.calls.append(("barcode", code, bc))

    def cut(self, *args, **kwargs):
        self.calls.append(("cut",))

    def close(self):
        self.closed = True

    @property
    def printed_text(self):
        return "".join(call[1] for call in self.calls if call[0] == "text")


@pytest.fixture
def printer():
    return FakePrinter()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep real .env files, config files and LABELWRAP_* variables out of tests."""
    saved = dict(os.environ)
    for key in list(os.environ):
        if key.startswith("LABELWRAP_"):
            del os.environ[key]
    monkeypatch.chdir(tmp_path)
    os.environ["LABELWRAP_ENV_PATH"] = str(tmp_path / ".env")
    os.environ["LABELWRAP_CONFIG_PATH"] = str(tmp_path / "config.json")
    yield tmp_path
    os.environ.clear()
    os.environ.update(saved)
