from pathlib import Path
from typing import Callable, Optional

import typer

from splice.app.runners import RenameRunner
from splice.common import bus, catalog
from splice.config import load_config_from_path
from splice.spec import ConfigError


def get_project_root() -> Path:
    return Path.cwd()


def make_runner() -> RenameRunner:
    # The directory holding pyproject.toml wins over cwd, so the index and
    # edited files resolve the same way from any subdirectory.
    cwd = get_project_root()
    try:
        config = load_config_from_path(cwd)
    except ConfigError as e:
        bus.error("error.config", error=str(e))
        raise typer.Exit(code=1)
    return RenameRunner(config.root_path or cwd, config=config)


def make_confirm_callback(yes: bool) -> Optional[Callable[[int], bool]]:
    if yes:
        return None

    def confirm(count: int) -> bool:
        return typer.confirm(catalog.get("rename.run.confirm"), default=False)

    return confirm
