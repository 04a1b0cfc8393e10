"""Persisted preferences for the console front end."""
from __future__ import annotations

import json
import os
import tempfile
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict

CONFIG_ENV = "CYOA_CONFIG"
CONFIG_FILENAME = "config.json"


@dataclass(slots=True)
class CliConfig:
    """Options the CLI remembers between runs."""

    stories_dir: str | None = None
    show_state: bool = False

    @classmethod
    def from_dict(cls, data: object) -> CliConfig:
        if not isinstance(data, dict):
            return cls()
        stories_dir = data.get("stories_dir")
        return cls(
            stories_dir=stories_dir if isinstance(stories_dir, str) and stories_dir.strip() else None,
            show_state=data.get("show_state") is True,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def config_path() -> Path:
    """Where the config lives: ``$CYOA_CONFIG``, else the XDG config home."""
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".config"
    return base / "cyoa" / CONFIG_FILENAME


def load_config(path: Path | str | None = None) -> CliConfig:
    """Read the config file; a missing, unreadable or malformed file gives defaults."""
    target = Path(path) if path is not None else config_path()
    try:
        with target.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError):
        return CliConfig()
    return CliConfig.from_dict(data)


def save_config(config: CliConfig, path: Path | str | None = None) -> Path:
    """Write ``config`` atomically and return the file it went to."""
    target = Path(path) if path is not None else config_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    cleaned = CliConfig.from_dict(config.to_dict())
    with tempfile.NamedTemporaryFile(
        "w", delete=False, dir=target.parent, prefix=target.name, suffix=".tmp", encoding="utf-8"
    ) as handle:
        json.dump(cleaned.to_dict(), handle, indent=2, sort_keys=True)
        handle.write("\n")
        tmp_path = Path(handle.name)
    try:
        os.replace(tmp_path, target)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
    return target
