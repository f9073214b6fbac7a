from __future__ import annotations

from pathlib import Path

from platformdirs import user_config_path

APP_NAME = "hedgeos"
APP_AUTHOR = "hedgeos"
SETTINGS_FILENAME = "settings.json"

PACKAGE_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_DATA_FILE = PACKAGE_ROOT / "data" / "filesystem.json"
STYLES_PATH = PACKAGE_ROOT / "styles" / "index.tcss"


def settings_path() -> Path:
    return Path(user_config_path(APP_NAME, APP_AUTHOR)) / SETTINGS_FILENAME


def resolve_data_file(
    explicit: Path | str | None,
    configured: Path | None,
) -> Path:
    """Pick the tree description: CLI flag, then env config, then bundled."""
    for candidate in (explicit, configured):
        if candidate:
            return Path(candidate).expanduser()
    return DEFAULT_DATA_FILE
