"""Repository for the launcher's JSON configuration file."""
import copy
import json
from typing import Any, Dict, Optional

from .base import BaseRepository

DEFAULTS: Dict[str, Any] = {
    'version': 1,
    'behavior': {
        'sort_mode': 'alphabetical',
        'start_game': 'last_played',
        'kids_mode_enabled': False,
        'exit_mode': 'default',
        'confirm_delete_timeout_ms': 3000,
        'release_order': 'ascending',
    },
    'platform': {
        'icons_path': '',
        'image_formats': ['png', 'jpg', 'webp'],
        'image_max_dimensions': [640, 480],
    },
    'logging': {
        'enabled': True,
        'dir': 'logs/',
        'max_files': 10,
    },
}

_MISSING = object()


def merge_into(target: dict, overlay: dict) -> None:
    """Recursively overlay *overlay* onto *target* in place.

    Objects present on both sides are merged key by key; any other value in
    *overlay* replaces the one in *target*.
    """
    for key, value in overlay.items():
        if isinstance(target.get(key), dict) and isinstance(value, dict):
            merge_into(target[key], value)
        else:
            target[key] = value


class ConfigRepository(BaseRepository):
    """Persists the configuration to a JSON file merged over :data:`DEFAULTS`.

    Keys are addressed with dotted notation, e.g. ``"behavior.release_order"``.
    """

    def __init__(self, file_path: Optional[str] = None) -> None:
        super().__init__(file_path)
        self.data: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    def load(self, file_path: str) -> bool:
        """Load *file_path* over the defaults.

        Returns:
            ``True`` when the file was merged or does not exist (defaults
            apply); ``False`` when it is unreadable or not a JSON object, in
            which case the defaults are used.
        """
        self._path = file_path
        self.data = copy.deepcopy(DEFAULTS)
        try:
            raw = self._read_bytes(file_path)
        except FileNotFoundError:
            self._log.info("No config at %s; using defaults", file_path)
            return True
        except OSError as exc:
            self._log.warning("Could not read config %s: %s", file_path, exc)
            return False
        try:
            loaded = json.loads(raw.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            self._log.warning("Config %s is corrupt, using defaults: %s", file_path, exc)
            return False
        if not isinstance(loaded, dict):
            self._log.warning("Config %s is not a JSON object, using defaults", file_path)
            return False
        merge_into(self.data, loaded)
        return True

    def save(self, file_path: Optional[str] = None) -> bool:
        if file_path:
            self._path = file_path
        return self._save_json(self.data)

    def get(self, key: str, fallback: Any = None) -> Any:
        """Return the value at dotted *key*, or *fallback* if any part is missing."""
        node: Any = self.data
        for part in key.split('.'):
            if not isinstance(node, dict):
                return fallback
            node = node.get(part, _MISSING)
            if node is _MISSING:
                return fallback
        return node

    def get_string(self, key: str, fallback: str = '') -> str:
        value = self.get(key, _MISSING)
        return value if isinstance(value, str) else fallback

    def set(self, key: str, value: Any) -> None:
        """Store *value* at dotted *key*, creating intermediate objects."""
        parts = key.split('.')
        node = self.data
        for part in parts[:-1]:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
        node[parts[-1]] = value
