"""Root test configuration: isolated config dir / cwd and fake collaborators"""

from pathlib import Path

import pytest

from pretty.core import pipeline


class FakeConverter:
    """Stands in for PandocConverter; records calls and writes a stub PDF."""

    def __init__(self, error: Exception = None):
        self.error = error
        self.calls = []

    def convert(self, source, output_pdf, settings):
        self.calls.append((Path(source), Path(output_pdf), settings))
        if self.error:
            raise self.error
        Path(output_pdf).write_bytes(b"%PDF-1.7\n")
        return output_pdf


@pytest.fixture(name="config_dir")
def config_dir_fixture(tmp_path):
    return tmp_path / "config"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, config_dir, monkeypatch):
    """Point the per-user config dir into tmp and run from a clean working directory."""
    monkeypatch.setenv("PRETTY_CONFIG_DIR", str(config_dir))
    monkeypatch.chdir(tmp_path)


@pytest.fixture(name="converter")
def converter_fixture(monkeypatch):
    """A FakeConverter that run_pipeline picks up when no converter is passed."""
    fake = FakeConverter()
    monkeypatch.setattr(pipeline, "PandocConverter", lambda: fake)
    return fake


@pytest.fixture(name="markdown_file")
def markdown_file_fixture(tmp_path):
    path = tmp_path / "doc.md"
    path.write_text("# Hello\n\nWorld\n")
    return path
