import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"
DEFAULT_SETTINGS_PATH = Path.home() / ".amor" / "settings.json"


class Preferences(BaseModel):
    """Per-device viewing preferences."""

    model_config = ConfigDict(extra="forbid")

    include_unapproved: bool = False


class LocalSettings:
    """
    Preferences persisted to a local JSON file under a single key.

    Loaded once into memory; every update is written straight through.
    A missing or unreadable file yields the defaults.
    """

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path) if path else DEFAULT_SETTINGS_PATH
        self.preferences = Preferences()

    def load(self) -> Preferences:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            self.preferences = Preferences.model_validate(raw.get(SETTINGS_KEY) or {})
        except FileNotFoundError:
            self.preferences = Preferences()
        except (OSError, ValueError, AttributeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable settings at {self.path}: {e}")
            self.preferences = Preferences()
        return self.preferences

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(
            json.dumps({SETTINGS_KEY: self.preferences.model_dump()}),
            encoding="utf-8",
        )
        os.replace(tmp_path, self.path)

    def update(self, **changes) -> Preferences:
        """Change one or more preferences and persist them."""
        self.preferences = Preferences.model_validate(
            {**self.preferences.model_dump(), **changes}
        )
        self.save()
        return self.preferences

    @property
    def include_unapproved(self) -> bool:
        return self.preferences.include_unapproved


def load_settings(path: Optional[Union[str, Path]] = None) -> LocalSettings:
    """Create a settings store and read it from disk."""
    store = LocalSettings(path)
    store.load()
    return store
