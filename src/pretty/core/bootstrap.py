"""First-run setup: copy bundled config and template assets into the config directory"""

import logging
import os
import shutil
from pathlib import Path

from pretty.errors import InitializationError


log = logging.getLogger(__name__)

ASSET_DIR = Path(__file__).resolve().parent.parent / "assets"
TEMPLATE_FILE = "template.tex"
ASSETS = ("pretty.yaml", TEMPLATE_FILE)


def _install(src: Path, dest: Path) -> None:
    """Copy src to dest via a temporary sibling so dest is never left half-written."""
    tmp = dest.with_name(f".{dest.name}.tmp")
    try:
        shutil.copyfile(src, tmp)
        os.replace(tmp, dest)
    finally:
        if tmp.exists():
            tmp.unlink()


def ensure_assets(config_dir: Path, asset_dir: Path = ASSET_DIR) -> list[Path]:
    """Create config_dir and write every bundled asset it lacks. Returns the files written.

    Existing files are never touched, so a user's customized template or
    pretty.yaml survives any number of runs.
    """
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InitializationError(f"Cannot create config directory {config_dir}: {e}") from e

    written = []
    for name in ASSETS:
        dest = config_dir / name
        if dest.exists():
            continue
        try:
            _install(asset_dir / name, dest)
        except OSError as e:
            log.error("Failed to write %s: %s", dest, e)
            continue
        log.info("Wrote default %s", dest)
        written.append(dest)

    missing = [name for name in ASSETS if not (config_dir / name).is_file()]
    if missing:
        raise InitializationError(f"Missing assets in {config_dir}: {', '.join(missing)}")
    return written
