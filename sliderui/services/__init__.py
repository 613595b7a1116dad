"""Services package: expose all concrete services from one import."""
from .sort_service import SortMode, sort_games, sorted_games
from .settings_service import SettingsService
from .catalog_service import CatalogService

__all__ = [
    'SortMode',
    'sort_games',
    'sorted_games',
    'SettingsService',
    'CatalogService',
]
