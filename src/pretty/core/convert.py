"""External converter: build and run the pandoc command that renders the PDF"""

import logging
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Callable, Optional

from pretty.config import Settings
from pretty.core.bootstrap import TEMPLATE_FILE
from pretty.errors import ConversionFailed, ConverterNotFound, UnsupportedPlatform


log = logging.getLogger(__name__)

PANDOC = "pandoc"
PDF_ENGINE = "xelatex"
SUPPORTED_PLATFORMS = ("linux", "darwin")


class PandocConverter:
    """Runs pandoc with the config-dir template. `runner` defaults to subprocess.run."""

    def __init__(
        self,
        executable: str = PANDOC,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        timeout: Optional[float] = None,
        platform: Optional[str] = None,
        ):
        self.executable = executable
        self.runner = runner
        self.timeout = timeout
        self.platform = platform or sys.platform

    def build_command(self, source: Path, output_pdf: Path, template: Path, settings: Settings) -> list[str]:
        """Return the pandoc argv; presentation options go in as -V variables."""
        variables = {
            "mainfont":     settings.font,
            "title":        settings.title,
            "toc-title":    settings.toc_title,
            "author":       settings.author,
            "logo":         settings.logo,
            "toc-subtitle": settings.toc_subtitle,
        }
        cmd = [
            self.executable, str(source),
            "-f", "markdown",
            "-t", "pdf",
            f"--template={template}",
        ]
        for name, value in variables.items():
            if value:
                cmd += ["-V", f"{name}={value}"]
        cmd += [f"--pdf-engine={PDF_ENGINE}", "-o", str(output_pdf)]
        return cmd

    def convert(self, source: Path, output_pdf: Path, settings: Settings) -> Path:
        """Render source to output_pdf. Raises a CompilationError subclass on any failure."""
        if not self.platform.startswith(SUPPORTED_PLATFORMS):
            raise UnsupportedPlatform(self.platform)
        if shutil.which(self.executable) is None:
            raise ConverterNotFound(self.executable)

        template = settings.config_dir / TEMPLATE_FILE
        cmd = self.build_command(source, output_pdf, template, settings)
        log.info("Running: %s", " ".join(cmd))
        try:
            result = self.runner(cmd, capture_output=True, text=True, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise ConversionFailed(f"{self.executable} timed out after {e.timeout}s") from e
        except OSError as e:
            raise ConversionFailed(f"Failed to run {self.executable}: {e}") from e

        if result.returncode != 0:
            log.debug("%s stdout: %s", self.executable, result.stdout)
            raise ConversionFailed(
                f"{self.executable} exited with status {result.returncode}",
                returncode=result.returncode,
                stderr=result.stderr or "",
            )
        log.info("PDF generated: %s", output_pdf)
        return output_pdf
