"""Catalog data model and the path/name helpers used to derive its fields."""
from dataclasses import asdict, dataclass
from typing import Optional

# Sentinel for an entry whose custom order has not been assigned yet.
UNASSIGNED_ORDER = -1

# Whitespace as understood by the games-list format (ASCII only).
_WHITESPACE = ' \t\n\v\f\r'
_SEPARATORS = '/\\'


@dataclass
class Game:
    """One row of the games list.

    ``name`` is empty when the list supplies no display name; ``release`` and
    ``platform_variant`` are ``None`` when absent.
    """
    path: str
    order: int = UNASSIGNED_ORDER
    name: str = ''
    release: Optional[str] = None
    platform_id: str = ''
    platform_variant: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


def trim(s: str) -> str:
    return s.strip(_WHITESPACE)


def strip_parentheses(s: str) -> str:
    """Drop everything inside parentheses (and the parentheses), then trim.

    ``"Name (core)"`` -> ``"Name"``.
    """
    out = []
    in_paren = False
    for c in s:
        if c == '(':
            in_paren = True
        elif c == ')':
            in_paren = False
        elif not in_paren:
            out.append(c)
    return trim(''.join(out))


def parenthesis_content(s: str) -> Optional[str]:
    """Return the trimmed text inside the first ``(...)`` pair, or ``None``."""
    start = s.find('(')
    if start < 0:
        return None
    end = s.find(')', start + 1)
    if end < 0:
        return None
    inner = trim(s[start + 1:end])
    return inner or None


def containing_folder_name(path: str) -> str:
    """Name of the directory holding *path*.

    ``"/mnt/SDCARD/Roms/GBA (mgba)/game.gba"`` -> ``"GBA (mgba)"``.  Both ``/``
    and ``\\`` count as separators; a bare file name has no folder.
    """
    p = path.rstrip(_SEPARATORS)
    sep = max(p.rfind('/'), p.rfind('\\'))
    if sep < 0:
        return ''
    folder = p[:sep]
    start = max(folder.rfind('/'), folder.rfind('\\'))
    return trim(folder[start + 1:])


def file_stem(path: str) -> str:
    """Base name of *path* without its last extension.

    A name whose last dot is its first character (``.hidden``) is kept
    whole; ``..rom`` gives ``.``.
    """
    p = path.rstrip(_SEPARATORS)
    sep = max(p.rfind('/'), p.rfind('\\'))
    name = p[sep + 1:]
    dot = name.rfind('.')
    if dot <= 0:
        return name
    return name[:dot]
