"""Business logic for launcher settings."""
from typing import Any, Optional

from ..repositories.config_repository import ConfigRepository
from .sort_service import SortMode, release_descending

SORT_MODE_KEY = 'behavior.sort_mode'


class SettingsService:
    """Reads and updates launcher settings, delegating persistence to
    :class:`~sliderui.repositories.config_repository.ConfigRepository`.

    Also serves as the string-lookup capability handed to the sort engine.
    """

    def __init__(self, repository: ConfigRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        return self._repo.get(key, default)

    def get_string(self, key: str, fallback: str = '') -> str:
        """Return the string at dotted *key*, or *fallback* when it is missing
        or not a string."""
        return self._repo.get_string(key, fallback)

    def set(self, key: str, value: Any) -> None:
        self._repo.set(key, value)

    def save(self, file_path: Optional[str] = None) -> bool:
        """Persist the settings.  Returns ``False`` on write failure."""
        return self._repo.save(file_path)

    def sort_mode(self) -> SortMode:
        """Startup sort mode from ``behavior.sort_mode``; ALPHA if unrecognised."""
        try:
            return SortMode.parse(self.get_string(SORT_MODE_KEY, 'alphabetical'))
        except ValueError:
            return SortMode.ALPHA

    def release_descending(self) -> bool:
        return release_descending(self)
