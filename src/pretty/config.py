"""Application configuration: settings schema, layer merge and pretty.yaml loader"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pretty.errors import ConfigDirNotFound


log = logging.getLogger(__name__)

APP_NAME = "pretty"
CONFIG_FILES = ("pretty.yaml", "pretty.yml")
CONFIG_DIR_ENV = "PRETTY_CONFIG_DIR"
DEFAULT_FILE_NAME = "pretty"

# Field groups for merge_settings; every Settings field appears in exactly one.
STRING_FIELDS = ("output_file_name", "title", "font", "toc_title")
PATH_FIELDS = ("input_path", "output_dir", "config_dir", "config_file")
FLAG_FIELDS = ("show", "keep", "hedgedoc")
OPTIONAL_FIELDS = ("author", "logo", "toc_subtitle", "domain", "document_id")

# Process-wide locations, never taken from a config file.
PROCESS_FIELDS = ("config_dir", "config_file")


class Settings(BaseModel):
    """One configuration layer. Field defaults are zero values, see DEFAULTS."""
    # YAML reads `document_id: 12345` as an int
    model_config = ConfigDict(coerce_numbers_to_str=True)

    input_path:       Optional[Path] = Field(default=None, description="Local Markdown source")
    output_dir:       Optional[Path] = Field(default=None, description="Directory for the PDF/MD artifacts")
    output_file_name: str = Field(default="", description="Artifact stem, no extension")
    config_dir:       Optional[Path] = None
    config_file:      Optional[Path] = None
    title:            str = ""
    author:           Optional[str] = None
    font:             str = ""
    logo:             Optional[str] = Field(default=None, description="Logo image path for the title page")
    toc_title:        str = ""
    toc_subtitle:     Optional[str] = None
    show:             bool = Field(default=False, description="Open the PDF after a successful run")
    keep:             bool = Field(default=False, description="Keep the fetched Markdown next to the PDF")
    domain:           Optional[str] = Field(default=None, description="Base URL of the HedgeDoc instance")
    document_id:      Optional[str] = None
    hedgedoc:         bool = Field(default=False, description="Source is a HedgeDoc instance")

    @field_validator(*STRING_FIELDS, mode="before")
    @classmethod
    def _blank_string(cls, v: Any) -> Any:
        """A bare `title:` key is empty, not invalid."""
        return "" if v is None else v

    @field_validator(*PATH_FIELDS, *OPTIONAL_FIELDS, mode="before")
    @classmethod
    def _blank_is_unset(cls, v: Any) -> Any:
        # "" would otherwise become Path(".") and count as set
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator(*PATH_FIELDS, mode="after")
    @classmethod
    def _expand_user(cls, v: Optional[Path]) -> Optional[Path]:
        return v.expanduser() if v is not None else None


DEFAULTS = Settings(
    output_file_name=DEFAULT_FILE_NAME,
    title="Pretty Document",
    font="Ubuntu",
    toc_title="Table of Contents",
)


def merge_settings(mine: Settings, other: Settings) -> Settings:
    """Combine two layers: `mine` wins, `other` fills whatever `mine` leaves empty."""
    data: dict[str, Any] = {}
    for name in STRING_FIELDS:
        data[name] = getattr(mine, name) or getattr(other, name)
    for name in PATH_FIELDS + OPTIONAL_FIELDS:
        value = getattr(mine, name)
        data[name] = value if value is not None else getattr(other, name)
    for name in FLAG_FIELDS:
        data[name] = getattr(mine, name) or getattr(other, name)
    return Settings(**data)


def get_config_dir() -> Path:
    """Per-user config directory: $PRETTY_CONFIG_DIR, else the platform app dir."""
    if env := os.getenv(CONFIG_DIR_ENV):
        return Path(env).expanduser()
    app_dir = typer.get_app_dir(APP_NAME)
    # expanduser leaves "~" in place when no home directory is known
    if not app_dir or app_dir.startswith("~"):
        raise ConfigDirNotFound()
    return Path(app_dir)


def find_config_file(directory: Path) -> Optional[Path]:
    """Return the first pretty.yaml/pretty.yml in directory, or None."""
    for name in CONFIG_FILES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def load_layer(path: Path) -> Optional[Settings]:
    """Parse one config file into a layer. Returns None when it cannot be used."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        log.warning("Ignoring config file %s: %s", path, e)
        return None

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        log.warning("Ignoring config file %s: expected a mapping, got %s", path, type(data).__name__)
        return None

    data = {k: v for k, v in data.items() if k not in PROCESS_FIELDS}
    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        log.warning("Ignoring config file %s: %s", path, e)
        return None


def _overlay(base: Settings, directory: Path) -> Settings:
    path = find_config_file(directory)
    if path is None:
        log.debug("No config file in %s", directory)
        return base
    layer = load_layer(path)
    if layer is None:
        return base
    log.debug("Loaded config layer %s", path)
    return merge_settings(layer, base)


def load_config(
    overrides: dict[str, Any] = None,
    config_dir: Optional[Path] = None,
    cwd: Optional[Path] = None,
    ) -> Settings:
    """Resolve Settings: defaults, then <config_dir>/pretty.yaml, then ./pretty.yaml, then non-None CLI overrides."""
    if config_dir is None:
        config_dir = get_config_dir()
    if cwd is None:
        try:
            cwd = Path.cwd()
        except OSError as e:
            log.debug("No working directory, skipping local config: %s", e)

    settings = _overlay(DEFAULTS, config_dir)
    if cwd is not None:
        settings = _overlay(settings, cwd)

    data = settings.model_dump()
    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    data["config_dir"] = config_dir
    data["config_file"] = find_config_file(config_dir) or config_dir / CONFIG_FILES[0]
    return Settings.model_validate(data)
