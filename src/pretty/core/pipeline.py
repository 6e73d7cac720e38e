"""Pipeline orchestration: config -> assets -> source -> convert -> preserve -> show"""

import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Union

from pretty.config import Settings, load_config
from pretty.core.bootstrap import ensure_assets
from pretty.core.convert import PandocConverter
from pretty.core.fetch import default_tmp_file, document_url, fetch_markdown
from pretty.core.paths import check_output_dir, output_md, output_pdf, resolve_output
from pretty.core.viewer import open_file
from pretty.errors import CopyError, MissingInput, MissingRemoteIdentity


log = logging.getLogger(__name__)


class Stage(str, Enum):
    init = "init"
    config_resolved = "config_resolved"
    assets_ready = "assets_ready"
    source_ready = "source_ready"
    converted = "converted"
    preserved = "preserved"
    shown = "shown"
    done = "done"


@dataclass
class PipelineResult:
    """What a run reached and produced."""
    settings: Settings
    stage: Stage = Stage.init
    source: Optional[Path] = None
    pdf: Optional[Path] = None
    markdown: Optional[Path] = None     # preserved copy of a fetched document
    converted: bool = False

    def advance(self, stage: Stage) -> None:
        log.info("%s -> %s", self.stage.value, stage.value)
        self.stage = stage


def missing_identity(settings: Settings) -> list[str]:
    """Names of the remote identity fields that are unset."""
    return [name for name in ("domain", "document_id") if not getattr(settings, name)]


def validate_remote(settings: Settings) -> None:
    """Raise MissingRemoteIdentity if a HedgeDoc source lacks its domain or document id."""
    if settings.hedgedoc and (missing := missing_identity(settings)):
        raise MissingRemoteIdentity(missing)


def resolve_settings(
    overrides: dict[str, Any] = None,
    output: Optional[Union[str, Path]] = None,
    config_dir: Optional[Path] = None,
    cwd: Optional[Path] = None,
    ) -> Settings:
    """Load layered config and settle the output location.

    An explicit output path behaves like any other CLI value and wins over
    the config files. Without one, a configured output_dir is validated and
    the current directory is used when none is configured.
    """
    settings = load_config(overrides, config_dir=config_dir, cwd=cwd)
    if output is not None:
        output_dir, base_name = resolve_output(output)
        update = {"output_dir": output_dir, "output_file_name": base_name}
    elif settings.output_dir is not None:
        update = {"output_dir": check_output_dir(settings.output_dir)}
    else:
        update = {"output_dir": check_output_dir(cwd or Path("."))}
    return settings.model_copy(update=update)


def run_pipeline(
    overrides: dict[str, Any] = None,
    output: Optional[Union[str, Path]] = None,
    *,
    converter: Optional[PandocConverter] = None,
    fetch: Optional[Callable[[str, Path], Path]] = None,
    opener: Optional[Callable[[Path], None]] = None,
    tmp_file: Optional[Path] = None,
    config_dir: Optional[Path] = None,
    cwd: Optional[Path] = None,
    strict_remote: bool = False,
    ) -> PipelineResult:
    """Run one conversion. Every failure propagates as a PrettyError.

    A HedgeDoc source without domain or document id ends the run early with
    converted=False, unless strict_remote is set, in which case it raises
    MissingRemoteIdentity before any work is done.
    """
    settings = resolve_settings(overrides, output, config_dir=config_dir, cwd=cwd)
    result = PipelineResult(settings=settings)
    result.advance(Stage.config_resolved)
    if strict_remote:
        validate_remote(settings)

    ensure_assets(settings.config_dir)
    result.advance(Stage.assets_ready)

    # --- source ---
    if settings.hedgedoc:
        if missing := missing_identity(settings):
            log.warning("No %s given for the HedgeDoc source, nothing to convert", " or ".join(missing))
            result.advance(Stage.done)
            return result
        url = document_url(settings.domain, settings.document_id)
        source = (fetch or fetch_markdown)(url, tmp_file or default_tmp_file())
        settings = settings.model_copy(update={"input_path": source})
        result.settings = settings
    else:
        source = settings.input_path
        if source is None:
            raise MissingInput("No input file given")
        if not source.is_file():
            raise MissingInput(f"Input file does not exist: {source}")
    result.source = source
    result.advance(Stage.source_ready)

    # --- convert ---
    pdf = output_pdf(settings.output_dir, settings.output_file_name)
    (converter or PandocConverter()).convert(source, pdf, settings)
    result.pdf = pdf
    result.converted = True
    result.advance(Stage.converted)

    # --- preserve ---
    if settings.keep and settings.hedgedoc:
        md = output_md(settings.output_dir, settings.output_file_name)
        try:
            shutil.copyfile(source, md)
        except OSError as e:
            raise CopyError(f"Could not copy Markdown to {md}: {e}", pdf=pdf) from e
        log.info("Copied markdown file to %s", md)
        result.markdown = md
        result.advance(Stage.preserved)

    # --- show ---
    if settings.show:
        (opener or open_file)(pdf)
        result.advance(Stage.shown)

    result.advance(Stage.done)
    return result
