"""Repository for the games list (``gamePath;order;gameName;release``)."""
import re
from collections.abc import Sequence
from typing import List, Optional

from ..models import (
    UNASSIGNED_ORDER, Game, containing_folder_name, parenthesis_content,
    strip_parentheses, trim,
)
from .base import BaseRepository
from .csv_codec import DEFAULT_DELIMITER, RecordCodec

HEADER = ['gamePath', 'order', 'gameName', 'release']

_INT_RE = re.compile(r'[+-]?[0-9]+')
_INT_MIN = -2 ** 31
_INT_MAX = 2 ** 31 - 1


def parse_order(value: str) -> int:
    """Parse a whole-string base-10 order; anything else is unassigned."""
    value = trim(value)
    if not _INT_RE.fullmatch(value):
        return UNASSIGNED_ORDER
    order = int(value)
    if not _INT_MIN <= order <= _INT_MAX:
        return UNASSIGNED_ORDER
    return order


def game_from_row(row: List[str]) -> Game:
    """Build a :class:`Game` from a positional ``[path, order, name, release]`` row.

    Missing trailing columns count as empty.
    """
    cols = list(row[:4]) + [''] * (4 - len(row[:4]))
    path, order, name, release = cols
    path = trim(path)
    release = trim(release)
    folder = containing_folder_name(path)
    return Game(
        path=path,
        order=parse_order(order),
        name=strip_parentheses(name),
        release=release or None,
        platform_id=strip_parentheses(folder),
        platform_variant=parenthesis_content(folder),
    )


def game_to_row(game: Game) -> List[str]:
    return [game.path, str(game.order), game.name, game.release or '']


class GamesView(Sequence):
    """Read-only view over the live games list (no copy is made)."""

    def __init__(self, games: List[Game]) -> None:
        self._games = games

    def __getitem__(self, index):
        return self._games[index]

    def __len__(self) -> int:
        return len(self._games)

    def __repr__(self) -> str:
        return f"GamesView({self._games!r})"


class CatalogRepository(BaseRepository):
    """Holds the ordered games list and persists it as a delimited file.

    The list order is the canonical display / custom order.  Mutations
    (:meth:`move_up`, :meth:`move_down`, :meth:`remove`,
    :meth:`ensure_orders_assigned`) act on memory only and leave every
    ``order`` equal to its index; call :meth:`commit` to persist.

    Not thread-safe: callers serialise access.
    """

    def __init__(self, file_path: Optional[str] = None,
                 delimiter: str = DEFAULT_DELIMITER) -> None:
        super().__init__(file_path)
        self._delimiter = delimiter
        self._games: List[Game] = []

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self, file_path: str) -> bool:
        """Replace the in-memory list with the contents of *file_path*.

        A first row whose first field contains ``path`` (any case) is a
        header and is skipped.  *file_path* becomes the commit target even
        when loading fails.

        Returns:
            ``False`` only when the file cannot be read; the list is then
            empty.
        """
        self._path = file_path
        codec = RecordCodec(self._delimiter)
        if not codec.load(file_path):
            self._games = []
            self._log.warning("Could not load games list %s: %s",
                              file_path, codec.last_error)
            return False

        rows = codec.rows
        start = 1 if rows and rows[0] and 'path' in rows[0][0].lower() else 0
        self._games = [game_from_row(row) for row in rows[start:]]
        self._log.info("Loaded %d games from %s", len(self._games), file_path)
        return True

    def commit(self) -> bool:
        """Atomically write the header and every entry to the loaded path.

        Returns:
            ``False`` when no path is configured or the write fails; the
            previous file is then untouched.
        """
        if not self._path:
            self._log.warning("Commit requested but no games list path is configured")
            return False
        rows = [HEADER] + [game_to_row(g) for g in self._games]
        codec = RecordCodec(self._delimiter)
        if not codec.save(self._path, rows):
            self._log.error("Failed to commit %d games to %s", len(self._games), self._path)
            return False
        self._log.info("Committed %d games to %s", len(self._games), self._path)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def games(self) -> GamesView:
        return GamesView(self._games)

    def __len__(self) -> int:
        return len(self._games)

    def find_by_path(self, path: str) -> int:
        """Index of the first entry with *path*, or ``len(games)`` if none."""
        for i, game in enumerate(self._games):
            if game.path == path:
                return i
        return len(self._games)

    # ------------------------------------------------------------------
    # Mutations (memory only)
    # ------------------------------------------------------------------

    def ensure_orders_assigned(self) -> None:
        """Give unassigned entries an order, then renumber everything 0..N-1.

        Unassigned entries receive ``max_order + 1``, ``max_order + 2``, ...
        in list order.  The final renumbering replaces every order,
        explicit ones included, with the entry's index.
        """
        max_order = max((g.order for g in self._games if g.order >= 0), default=-1)
        for game in self._games:
            if game.order < 0:
                max_order += 1
                game.order = max_order
        self._normalize_orders()

    def move_up(self, index: int) -> None:
        """Swap the entry at *index* with its predecessor; no-op at the top."""
        if index <= 0 or index >= len(self._games):
            return
        games = self._games
        games[index - 1], games[index] = games[index], games[index - 1]
        self._normalize_orders()

    def move_down(self, index: int) -> None:
        """Swap the entry at *index* with its successor; no-op at the bottom."""
        if index < 0 or index + 1 >= len(self._games):
            return
        games = self._games
        games[index], games[index + 1] = games[index + 1], games[index]
        self._normalize_orders()

    def remove(self, index: int) -> bool:
        """Erase the entry at *index*.  Returns ``False`` if out of range."""
        if index < 0 or index >= len(self._games):
            return False
        del self._games[index]
        self._normalize_orders()
        return True

    def _normalize_orders(self) -> None:
        for i, game in enumerate(self._games):
            game.order = i
