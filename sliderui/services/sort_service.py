"""Display ordering for the games list.

Three modes, all stable and all falling back to ``path`` when the primary
key ties:

* ``ALPHA``   -- case-insensitive display name (name, else file stem);
* ``RELEASE`` -- release date; dated entries first, undated ones by ALPHA;
* ``CUSTOM``  -- stored ``order``.

The functions never touch the catalog itself: they sort the list handed to
them, or return a new one.
"""
import enum
import logging
import re
from typing import Iterable, List, NamedTuple, Optional, Protocol, Tuple

from ..models import Game, file_stem

RELEASE_ORDER_KEY = 'behavior.release_order'
RELEASE_ORDER_DEFAULT = 'ascending'
DESCENDING_VALUES = ('descending', 'desc')

_log = logging.getLogger('sliderui.sort')

_DIGITS_RE = re.compile(r'[0-9]+')
_ASCII_LOWER = str.maketrans('ABCDEFGHIJKLMNOPQRSTUVWXYZ', 'abcdefghijklmnopqrstuvwxyz')


class SortMode(enum.Enum):
    ALPHA = 'alpha'
    RELEASE = 'release'
    CUSTOM = 'custom'

    @classmethod
    def parse(cls, value: str) -> 'SortMode':
        """Map a user-facing name (``alpha``/``alphabetical``, ``release``,
        ``custom``; any case) to a mode.  Raises ``ValueError`` otherwise."""
        name = value.strip().lower()
        if name == 'alphabetical':
            name = 'alpha'
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown sort mode: {value!r}") from None


class StringConfig(Protocol):
    """Anything that can answer a single string configuration lookup."""

    def get_string(self, key: str, fallback: str) -> str: ...


class ReleaseDate(NamedTuple):
    year: int
    month: int = 0
    day: int = 0


def parse_release(value: Optional[str]) -> Optional[ReleaseDate]:
    """Parse ``YYYY``, ``YYYY-M[M]`` or ``YYYY-M[M]-D[D]``.

    Fields are split on ``-``.  A dangling ``-`` after the year or month adds
    no field (``"1996-"`` is 1996), and anything after the day is ignored.
    Month must be 1-12 and day 1-31 (no calendar check).  Missing parts are
    0.  Returns ``None`` for anything else.
    """
    if not value:
        return None
    parts = value.split('-')
    if len(parts) > 1 and parts[-1] == '':
        parts.pop()
    year = parts[0]
    if len(year) != 4 or not _DIGITS_RE.fullmatch(year):
        return None
    fields = [int(year)]
    for part, high in zip(parts[1:3], (12, 31)):
        if not 1 <= len(part) <= 2 or not _DIGITS_RE.fullmatch(part):
            return None
        number = int(part)
        if not 1 <= number <= high:
            return None
        fields.append(number)
    return ReleaseDate(*fields)


def release_descending(config: Optional[StringConfig]) -> bool:
    """Read ``behavior.release_order``; ``descending``/``desc`` (any case) wins."""
    if config is None:
        return False
    value = config.get_string(RELEASE_ORDER_KEY, RELEASE_ORDER_DEFAULT)
    return value.lower() in DESCENDING_VALUES


def display_key(game: Game) -> str:
    """Case-folded display name (ASCII only): the name, else the file stem."""
    label = game.name if game.name else file_stem(game.path)
    return label.translate(_ASCII_LOWER)


def _alpha_key(game: Game) -> Tuple:
    return (display_key(game), game.path)


def _custom_key(game: Game) -> Tuple:
    return (game.order, game.path)


def _release_key(descending: bool):
    def key(game: Game) -> Tuple:
        date = parse_release(game.release)
        if date is None:
            return (1,) + _alpha_key(game)
        if descending:
            return (0, -date.year, -date.month, -date.day, game.path)
        return (0, date.year, date.month, date.day, game.path)
    return key


def sort_games(games: List[Game], mode: SortMode, descending: bool = False) -> None:
    """Sort *games* in place.  Pass a copy, never the catalog's own list.

    *descending* flips the date comparison of :attr:`SortMode.RELEASE` only.
    """
    if mode is SortMode.ALPHA:
        games.sort(key=_alpha_key)
    elif mode is SortMode.RELEASE:
        games.sort(key=_release_key(descending))
    elif mode is SortMode.CUSTOM:
        games.sort(key=_custom_key)
    else:
        raise ValueError(f"Unknown sort mode: {mode!r}")
    _log.debug("Sorted %d games by %s%s", len(games), mode.value,
               " (descending)" if descending and mode is SortMode.RELEASE else "")


def sorted_games(games: Iterable[Game], mode: SortMode,
                 config: Optional[StringConfig] = None) -> List[Game]:
    """Return a new, sorted list of *games*.

    *config* is consulted only for :attr:`SortMode.RELEASE`.
    """
    result = list(games)
    descending = release_descending(config) if mode is SortMode.RELEASE else False
    sort_games(result, mode, descending=descending)
    return result
