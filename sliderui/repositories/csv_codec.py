"""Delimited record codec for the games list.

Reads and writes rows of fields using one quoting grammar:

* fields are separated by a single delimiter character (``;`` by default);
* a field may be wrapped in ``"``; inside quotes the delimiter and line
  breaks are literal and ``""`` stands for one ``"``;
* rows end with LF.  CR bytes are dropped on read (CRLF tolerance) and
  never written.

Parsing never fails on malformed structure; only I/O errors are reported.
"""
import enum
import logging
from typing import List, Optional, Sequence

from .base import atomic_write

Row = List[str]

DEFAULT_DELIMITER = ';'
QUOTE = '"'
LF = '\n'
CR = '\r'

# Fields are decoded as UTF-8 with surrogateescape so that arbitrary bytes
# survive a parse/serialize cycle unchanged.
ENCODING = 'utf-8'
ENCODING_ERRORS = 'surrogateescape'

_log = logging.getLogger('sliderui.codec')


class ParseState(enum.Enum):
    OUTSIDE = 'outside'
    IN_FIELD = 'in_field'
    IN_QUOTED_FIELD = 'in_quoted_field'
    IN_QUOTED_QUOTE = 'in_quoted_quote'


class RecordCodec:
    """Parses bytes into rows of fields and serializes rows back to bytes.

    A codec owns the rows of its last :meth:`load`.  It cannot be copied:
    ``copy.copy`` and ``copy.deepcopy`` raise ``TypeError``.
    """

    def __init__(self, delimiter: str = DEFAULT_DELIMITER, allow_crlf: bool = True) -> None:
        if len(delimiter) != 1 or delimiter in (QUOTE, LF, CR):
            raise ValueError(f"Invalid delimiter: {delimiter!r}")
        self.delimiter = delimiter
        self.allow_crlf = allow_crlf
        self._rows: List[Row] = []
        self._last_error: Optional[str] = None

    def __copy__(self):
        raise TypeError(f"{type(self).__name__} instances cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError(f"{type(self).__name__} instances cannot be copied")

    # ------------------------------------------------------------------
    # File API
    # ------------------------------------------------------------------

    def load(self, path: str) -> bool:
        """Read and parse *path*.

        Returns:
            ``True`` on success (even for malformed content); ``False`` if
            the file cannot be opened or read.  :attr:`last_error` then holds
            a diagnostic message.
        """
        self.clear()
        try:
            with open(path, 'rb') as fh:
                data = fh.read()
        except OSError as exc:
            self._last_error = f"open failed: {exc.strerror or exc}"
            _log.warning("Could not read %s: %s", path, exc)
            return False
        self._rows = self.parse(data)
        return True

    def save(self, path: str, rows: Sequence[Sequence[str]]) -> bool:
        """Serialize *rows* and hand them to :func:`atomic_write`."""
        return atomic_write(path, self.serialize(rows))

    @property
    def rows(self) -> List[Row]:
        """Rows parsed by the last successful :meth:`load`."""
        return self._rows

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def clear(self) -> None:
        self._rows = []
        self._last_error = None

    # ------------------------------------------------------------------
    # Codec
    # ------------------------------------------------------------------

    def parse(self, data: bytes) -> List[Row]:
        """Parse *data* into rows of fields in a single forward scan."""
        text = data.decode(ENCODING, ENCODING_ERRORS)
        delimiter = self.delimiter
        rows: List[Row] = []
        row: Row = []
        field: List[str] = []
        state = ParseState.OUTSIDE

        def end_field():
            row.append(''.join(field))
            field.clear()

        def end_row():
            nonlocal row
            rows.append(row)
            row = []

        i = 0
        n = len(text)
        while i < n:
            c = text[i]
            if c == CR and self.allow_crlf:
                i += 1
                continue

            if state is ParseState.IN_QUOTED_FIELD:
                if c == QUOTE:
                    state = ParseState.IN_QUOTED_QUOTE
                else:
                    field.append(c)
            elif state is ParseState.IN_QUOTED_QUOTE:
                if c == QUOTE:
                    field.append(QUOTE)
                    state = ParseState.IN_QUOTED_FIELD
                elif c == delimiter:
                    end_field()
                    state = ParseState.OUTSIDE
                elif c == LF:
                    end_field()
                    end_row()
                    state = ParseState.OUTSIDE
                else:
                    # Stray byte after a closing quote: re-read it as the start
                    # of an unquoted segment of the same field.
                    state = ParseState.IN_FIELD
                    continue
            elif c == delimiter:
                end_field()
                state = ParseState.OUTSIDE
            elif c == LF:
                end_field()
                end_row()
                state = ParseState.OUTSIDE
            elif c == QUOTE and state is ParseState.OUTSIDE:
                state = ParseState.IN_QUOTED_FIELD
            else:
                field.append(c)
                state = ParseState.IN_FIELD
            i += 1

        if state is not ParseState.OUTSIDE:
            # Unterminated quotes are accepted as-is.
            end_field()
            end_row()
        elif row:
            end_row()
        return rows

    def needs_quoting(self, field: str) -> bool:
        if not field:
            return False
        return any(c in field for c in (QUOTE, LF, CR, self.delimiter))

    def quote(self, field: str) -> str:
        return QUOTE + field.replace(QUOTE, QUOTE * 2) + QUOTE

    def serialize(self, rows: Sequence[Sequence[str]]) -> bytes:
        """Serialize *rows*; every row, including the last, ends with LF."""
        out = []
        for row in rows:
            out.append(self.delimiter.join(
                self.quote(f) if self.needs_quoting(f) else f for f in row
            ))
            out.append(LF)
        return ''.join(out).encode(ENCODING, ENCODING_ERRORS)
