"""Error taxonomy: every fatal failure is a PrettyError carrying a category"""

from pathlib import Path
from typing import Optional


class PrettyError(Exception):
    """Base class for all errors that abort a run."""
    category = "Error"

    def render(self) -> str:
        return f"{self.category}: {self}"


# --- configuration ---

class ConfigError(PrettyError):
    category = "Configuration error"


class ConfigDirNotFound(ConfigError):
    def __init__(self, msg: str = "Config directory could not be found"):
        super().__init__(msg)


class MissingRemoteIdentity(ConfigError):
    """Remote source selected without both a domain and a document id."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"HedgeDoc source requires {' and '.join(missing)}")


class InitializationError(PrettyError):
    category = "Initialization error"


# --- paths ---

class PathError(PrettyError):
    category = "Path error"


class InvalidPath(PathError):
    pass


class MissingInput(PathError):
    pass


# --- download ---

class DownloadError(PrettyError):
    category = "Download error"


class DownloadTransportError(DownloadError):
    def __init__(self, url: str, cause: Exception):
        super().__init__(f'Failed to request content url "{url}": {cause}')


class DownloadStatusError(DownloadError):
    def __init__(self, url: str, status_code: int):
        self.status_code = status_code
        super().__init__(f'Unexpected status code {status_code} from "{url}"')


class DownloadWriteError(DownloadError):
    def __init__(self, path: Path, cause: Exception):
        super().__init__(f'Couldn\'t save to file "{path}": {cause}')


# --- compilation ---

class CompilationError(PrettyError):
    category = "Compilation error"


class UnsupportedPlatform(CompilationError):
    def __init__(self, platform: str):
        super().__init__(f"Unsupported platform: {platform}")


class ConverterNotFound(CompilationError):
    def __init__(self, name: str):
        super().__init__(f"{name} not found on PATH")


class ConversionFailed(CompilationError):
    """The converter could not be launched or exited non-zero."""

    def __init__(self, msg: str, returncode: Optional[int] = None, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        if stderr:
            msg = f"{msg}\n{stderr.rstrip()}"
        super().__init__(msg)


# --- after the PDF exists ---

class PostConversionError(PrettyError):
    """Failure in a step that runs after the PDF was produced."""

    def __init__(self, msg: str, pdf: Path):
        self.pdf = pdf
        super().__init__(f"{msg} (the PDF was written to {pdf})")


class CopyError(PostConversionError):
    category = "Copy error"


class OpenError(PostConversionError):
    category = "Open error"
