import os
import platform
from pathlib import Path
from typing import Mapping, Optional

APP_DIR_NAME = "lumina"


class PathManager:
    """
    Resolves the per-user locations lumina reads and writes.

    `LUMINA_CONFIG_DIR` overrides the OS default, which is what the
    launcher shell sets when it runs from a portable bundle.
    """

    def __init__(self, env: Optional[Mapping[str, str]] = None, config_dir: Optional[str] = None):
        self.env = env if env is not None else os.environ
        self.system = platform.system()
        self._override = config_dir
        self._setup_paths()

    def _default_config_root(self) -> Path:
        """OS-specific user config root (the directory holding `lumina/`)."""
        if self.system == "Windows":
            return Path(self.env.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        elif self.system == "Darwin":
            return Path.home() / "Library" / "Application Support"
        else:
            # Linux / Unix
            return Path(self.env.get("XDG_CONFIG_HOME", Path.home() / ".config"))

    def _setup_paths(self):
        override = self._override or self.env.get("LUMINA_CONFIG_DIR")
        if override:
            self.CONFIG_DIR = Path(override)
        else:
            self.CONFIG_DIR = self._default_config_root() / APP_DIR_NAME
        self.CONFIG_FILE = self.CONFIG_DIR / "config.json"

    # Accessors
    def get_config_dir(self) -> Path:
        return self.CONFIG_DIR

    def get_config_file(self) -> Path:
        return self.CONFIG_FILE

    def ensure_config_dir(self) -> Path:
        self.CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        return self.CONFIG_DIR
