"""Business logic for the games list screen."""
import logging
from typing import Dict, List, Optional

from ..models import Game, file_stem
from ..repositories.catalog_repository import CatalogRepository, GamesView
from .sort_service import SortMode, StringConfig, sorted_games

_log = logging.getLogger('sliderui.catalog')


def display_name(game: Game) -> str:
    """The game's name, or its file stem when the list gives none."""
    return game.name if game.name else file_stem(game.path)


def platform_label(game: Game) -> str:
    """``"GBA (mgba)"`` style label built from the platform folder."""
    if game.platform_variant:
        return f"{game.platform_id} ({game.platform_variant})"
    return game.platform_id


class CatalogService:
    """Browses, reorders and prunes the games list, delegating storage to
    :class:`~sliderui.repositories.catalog_repository.CatalogRepository`.

    Sorting for display always works on a copy; the repository's own order
    (the custom order) only changes through the move / remove operations.
    """

    def __init__(self, repository: CatalogRepository,
                 settings: Optional[StringConfig] = None) -> None:
        self._repo = repository
        self._settings = settings

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def load(self, file_path: str) -> bool:
        return self._repo.load(file_path)

    def games(self) -> GamesView:
        return self._repo.games()

    def find(self, path: str) -> Optional[int]:
        """Canonical index of *path*, or ``None`` when it is not listed."""
        index = self._repo.find_by_path(path)
        return index if index < len(self._repo) else None

    def sorted_view(self, mode: SortMode) -> List[Game]:
        """Return the games ordered by *mode* without touching the catalog."""
        return sorted_games(self._repo.games(), mode, self._settings)

    def to_dicts(self, games: List[Game]) -> List[Dict]:
        """Serialise *games* for the CLI / API.

        Each dict carries the entry's canonical ``index`` alongside its
        fields, so a sorted view can still address the catalog.
        """
        positions = {id(g): i for i, g in enumerate(self._repo.games())}
        out = []
        for game in games:
            data = game.to_dict()
            data['index'] = positions.get(id(game), len(self._repo))
            data['display_name'] = display_name(game)
            data['platform_label'] = platform_label(game)
            out.append(data)
        return out

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def move_up(self, index: int) -> None:
        self._repo.move_up(index)

    def move_down(self, index: int) -> None:
        self._repo.move_down(index)

    def assign_orders(self) -> None:
        self._repo.ensure_orders_assigned()

    def commit(self) -> bool:
        return self._repo.commit()

    def remove_and_commit(self, index: int) -> bool:
        """Remove the game at *index* and persist the list straight away.

        Returns:
            ``False`` when *index* is out of range or the commit fails.  A
            failed commit keeps the in-memory removal.
        """
        games = self._repo.games()
        if not 0 <= index < len(games):
            return False
        _log.info("Removing game: %s", display_name(games[index]))
        self._repo.remove(index)
        if not self._repo.commit():
            _log.error("Failed to commit game removal")
            return False
        return True
