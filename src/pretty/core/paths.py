"""Output location: split a user-supplied path into directory + base name"""

from pathlib import Path
from typing import Union

from pretty.config import DEFAULT_FILE_NAME
from pretty.errors import InvalidPath


def _cwd() -> Path:
    try:
        return Path.cwd()
    except OSError as e:
        raise InvalidPath(f"Current directory is unavailable: {e}") from e


def check_output_dir(output_dir: Path) -> Path:
    """Return output_dir made absolute; raise InvalidPath unless it is an existing directory."""
    if not output_dir.is_absolute():
        output_dir = _cwd() / output_dir
    if not output_dir.is_dir():
        raise InvalidPath(f"Destination does not exist: {output_dir}")
    return output_dir.resolve()


def resolve_output(path: Union[str, Path]) -> tuple[Path, str]:
    """Return (output_dir, base_name) for an output file or directory path.

    An existing directory keeps the default base name. Anything else is
    treated as a file path: its stem becomes the base name and its parent,
    or the current directory when it has none, the output directory.
    """
    path = Path(path).expanduser()
    if path.is_dir():
        return check_output_dir(path), DEFAULT_FILE_NAME

    base_name = path.stem or DEFAULT_FILE_NAME
    parent = path.parent if path.parent != Path(".") else _cwd()
    return check_output_dir(parent), base_name


def output_pdf(output_dir: Path, base_name: str) -> Path:
    return output_dir / f"{base_name}.pdf"


def output_md(output_dir: Path, base_name: str) -> Path:
    return output_dir / f"{base_name}.md"
