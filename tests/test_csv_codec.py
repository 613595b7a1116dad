#!/usr/bin/env python3
"""
Unit tests for the delimited record codec.

Run with:
    python -m pytest tests/test_csv_codec.py
"""
import copy
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sliderui.repositories import RecordCodec, atomic_write


class TmpDirMixin(unittest.TestCase):
    """Creates a fresh temp directory for each test."""

    def setUp(self):
        self.tmp = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def _path(self, name: str) -> str:
        return os.path.join(self.tmp, name)


# ===========================================================================
# Parsing
# ===========================================================================

class TestParse(unittest.TestCase):

    def setUp(self):
        self.codec = RecordCodec()

    def test_simple_rows(self):
        rows = self.codec.parse(b'a;b;c\nd;e;f\n')
        self.assertEqual(rows, [['a', 'b', 'c'], ['d', 'e', 'f']])

    def test_last_row_without_line_break(self):
        self.assertEqual(self.codec.parse(b'a;b\nc;d'), [['a', 'b'], ['c', 'd']])

    def test_empty_input_yields_no_rows(self):
        self.assertEqual(self.codec.parse(b''), [])

    def test_empty_fields_are_kept(self):
        self.assertEqual(self.codec.parse(b';x;;\n'), [['', 'x', '', '']])

    def test_trailing_delimiter_at_end_of_input(self):
        self.assertEqual(self.codec.parse(b'a;'), [['a']])

    def test_blank_line_is_a_single_empty_field(self):
        self.assertEqual(self.codec.parse(b'a\n\nb\n'), [['a'], [''], ['b']])

    def test_quoted_field_keeps_delimiter_and_line_break(self):
        rows = self.codec.parse(b'"x;y\nz";w\n')
        self.assertEqual(rows, [['x;y\nz', 'w']])

    def test_doubled_quote_is_literal_quote(self):
        self.assertEqual(self.codec.parse(b'"say ""hi""";b\n'), [['say "hi"', 'b']])

    def test_empty_quoted_field(self):
        self.assertEqual(self.codec.parse(b'"";b\n'), [['', 'b']])

    def test_text_after_closing_quote_joins_field(self):
        self.assertEqual(self.codec.parse(b'"ab"cd;e\n'), [['abcd', 'e']])

    def test_quote_inside_unquoted_field_is_literal(self):
        self.assertEqual(self.codec.parse(b'ab"cd;e\n'), [['ab"cd', 'e']])

    def test_unterminated_quote_is_accepted(self):
        self.assertEqual(self.codec.parse(b'a;"open;ended\nrow'), [['a', 'open;ended\nrow']])

    def test_closing_quote_at_end_of_input(self):
        self.assertEqual(self.codec.parse(b'a;"b"'), [['a', 'b']])

    def test_crlf_is_tolerated(self):
        self.assertEqual(self.codec.parse(b'a;b\r\nc;d\r\n'), [['a', 'b'], ['c', 'd']])

    def test_cr_is_dropped_everywhere(self):
        self.assertEqual(self.codec.parse(b'a\rb;"c\r\nd"\r\n'), [['ab', 'c\nd']])

    def test_cr_kept_when_crlf_tolerance_disabled(self):
        codec = RecordCodec(allow_crlf=False)
        self.assertEqual(codec.parse(b'a;b\r\n'), [['a', 'b\r']])

    def test_custom_delimiter(self):
        codec = RecordCodec(delimiter=',')
        self.assertEqual(codec.parse(b'a,b;c\n'), [['a', 'b;c']])

    def test_utf8_fields(self):
        rows = self.codec.parse('Pokémon;ポケモン\n'.encode('utf-8'))
        self.assertEqual(rows, [['Pokémon', 'ポケモン']])

    def test_invalid_delimiter_rejected(self):
        with self.assertRaises(ValueError):
            RecordCodec(delimiter='"')
        with self.assertRaises(ValueError):
            RecordCodec(delimiter=';;')


# ===========================================================================
# Serializing
# ===========================================================================

class TestSerialize(unittest.TestCase):

    def setUp(self):
        self.codec = RecordCodec()

    def test_plain_rows_end_with_lf(self):
        self.assertEqual(self.codec.serialize([['a', 'b'], ['c', '']]), b'a;b\nc;\n')

    def test_fields_needing_quotes(self):
        out = self.codec.serialize([['a;b', 'say "hi"', 'two\nlines', 'cr\rhere', 'plain']])
        self.assertEqual(out, b'"a;b";"say ""hi""";"two\nlines";"cr\rhere";plain\n')

    def test_empty_field_is_not_quoted(self):
        self.assertFalse(self.codec.needs_quoting(''))
        self.assertEqual(self.codec.serialize([['', '']]), b';\n')

    def test_no_rows_is_empty_output(self):
        self.assertEqual(self.codec.serialize([]), b'')

    def test_special_fields_survive_round_trip(self):
        row = ['semi;colon', 'a "quoted" word', 'line\nbreak', '"', ';', '\n', 'plain']
        self.assertEqual(self.codec.parse(self.codec.serialize([row])), [row])

    def test_undecodable_bytes_survive_round_trip(self):
        data = b'caf\xe9;x\n'
        self.assertEqual(self.codec.serialize(self.codec.parse(data)), data)


# ===========================================================================
# File I/O
# ===========================================================================

class TestCodecFiles(TmpDirMixin):

    def test_load_reads_rows(self):
        path = self._path('list.csv')
        with open(path, 'wb') as fh:
            fh.write(b'a;b\n')
        codec = RecordCodec()
        self.assertTrue(codec.load(path))
        self.assertEqual(codec.rows, [['a', 'b']])
        self.assertIsNone(codec.last_error)

    def test_load_missing_file_fails_with_message(self):
        codec = RecordCodec()
        self.assertFalse(codec.load(self._path('missing.csv')))
        self.assertEqual(codec.rows, [])
        self.assertTrue(codec.last_error.startswith('open failed'))

    def test_clear_resets_state(self):
        codec = RecordCodec()
        codec.load(self._path('missing.csv'))
        codec.clear()
        self.assertIsNone(codec.last_error)

    def test_save_writes_lf_only(self):
        path = self._path('out.csv')
        self.assertTrue(RecordCodec().save(path, [['a', 'b'], ['c', 'd']]))
        with open(path, 'rb') as fh:
            self.assertEqual(fh.read(), b'a;b\nc;d\n')

    def test_codec_cannot_be_copied(self):
        codec = RecordCodec()
        with self.assertRaises(TypeError):
            copy.copy(codec)
        with self.assertRaises(TypeError):
            copy.deepcopy(codec)


class TestAtomicWrite(TmpDirMixin):

    def test_writes_exact_bytes(self):
        path = self._path('f.bin')
        self.assertTrue(atomic_write(path, b'\x00abc\n'))
        with open(path, 'rb') as fh:
            self.assertEqual(fh.read(), b'\x00abc\n')

    def test_replaces_existing_file(self):
        path = self._path('f.txt')
        with open(path, 'wb') as fh:
            fh.write(b'old')
        self.assertTrue(atomic_write(path, b'new'))
        with open(path, 'rb') as fh:
            self.assertEqual(fh.read(), b'new')

    def test_empty_path_fails(self):
        self.assertFalse(atomic_write('', b'x'))

    def test_missing_directory_fails(self):
        self.assertFalse(atomic_write(self._path('no/such/dir/f.txt'), b'x'))

    def test_failed_rename_leaves_original_and_no_temp_files(self):
        path = self._path('f.txt')
        with open(path, 'wb') as fh:
            fh.write(b'old')
        with patch('sliderui.repositories.base.os.replace', side_effect=OSError('boom')):
            self.assertFalse(atomic_write(path, b'new'))
        with open(path, 'rb') as fh:
            self.assertEqual(fh.read(), b'old')
        self.assertEqual(os.listdir(self.tmp), ['f.txt'])


if __name__ == '__main__':
    unittest.main()
