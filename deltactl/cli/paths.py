from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir, user_log_dir

APP_NAME = "deltactl"


@dataclass(frozen=True, slots=True)
class CliPaths:
    config_dir: Path
    log_dir: Path

    @property
    def config_path(self) -> Path:
        return self.config_dir / "config.toml"

    @property
    def log_file(self) -> Path:
        return self.log_dir / "deltactl.log"


def get_paths() -> CliPaths:
    override = os.getenv("DELTACTL_CONFIG_DIR", "").strip()
    config_dir = Path(override).expanduser() if override else Path(user_config_dir(APP_NAME))
    return CliPaths(config_dir=config_dir, log_dir=Path(user_log_dir(APP_NAME)))
