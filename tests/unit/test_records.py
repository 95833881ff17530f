"""
Unit tests for the KeyValue record codec
"""

import pytest

from reduce_worker import records
from reduce_worker.errors import DecodeError
from reduce_worker.records import KeyValue


class TestEncode:
    """Tests for record encoding"""

    def test_compact_format(self):
        """Test that records use compact separators and Key/Value field names"""
        assert records.encode('a', '1') == '{"Key":"a","Value":"1"}'

    def test_escapes_markup_characters(self):
        """Test that <, > and & are written as unicode escapes"""
        assert records.encode('<a&b>', '') == '{"Key":"\\u003ca\\u0026b\\u003e","Value":""}'

    def test_escapes_line_separators(self):
        """Test that U+2028 and U+2029 are escaped so a record stays on one line"""
        encoded = records.encode('x\u2028y\u2029z', 'v')
        assert '\u2028' not in encoded and '\u2029' not in encoded
        assert '\\u2028' in encoded and '\\u2029' in encoded

    def test_non_ascii_written_raw(self):
        """Test that non-ASCII text is not escaped"""
        assert records.encode('café', '日本') == '{"Key":"café","Value":"日本"}'

    def test_lone_surrogates_replaced(self):
        """Test that lone surrogates are written as U+FFFD instead of failing to encode"""
        encoded = records.encode('k\udc80', 'x\ud800')

        assert encoded == '{"Key":"k\ufffd","Value":"x\ufffd"}'
        encoded.encode('utf-8')

    def test_control_characters_stay_on_one_line(self):
        """Test that embedded newlines and tabs are escaped"""
        encoded = records.encode('a\nb', 'c\td')
        assert '\n' not in encoded
        assert records.decode(encoded) == KeyValue('a\nb', 'c\td')


class TestDecode:
    """Tests for record decoding"""

    def test_decodes_bytes_and_str(self):
        """Test that both bytes and str lines decode"""
        assert records.decode(b'{"Key":"a","Value":"1"}\n') == KeyValue('a', '1')
        assert records.decode('{"Key":"a","Value":"1"}') == KeyValue('a', '1')

    def test_field_names_are_case_insensitive(self):
        """Test that field names match regardless of case"""
        assert records.decode('{"KEY":"a","value":"1"}') == KeyValue('a', '1')

    def test_missing_and_null_fields_are_empty(self):
        """Test that missing or null fields decode as empty strings"""
        assert records.decode('{}') == KeyValue('', '')
        assert records.decode('{"Key":null,"Value":"1"}') == KeyValue('', '1')

    def test_unknown_fields_ignored(self):
        """Test that extra fields do not cause a decode error"""
        assert records.decode('{"Key":"a","Value":"1","Other":[1]}') == KeyValue('a', '1')

    def test_lone_surrogate_replaced(self):
        """Test that an escaped lone surrogate decodes to U+FFFD"""
        assert records.decode('{"Key":"\\ud800","Value":"1"}').key == '\ufffd'

    @pytest.mark.parametrize('line', [
        'not json',
        '{"Key":"a","Value":',
        pytest.param('[' * 200000, id='deeply-nested'),
        '"a"',
        '42',
        '{"Key":1,"Value":"1"}',
        '{"Key":"a","Value":true}',
        '{"Key":"a","Value":"1","x":NaN}',
        '{"Key":"a","Value":"1","x":-Infinity}',
        '[' * 200000,
    ])
    def test_rejects_malformed_lines(self, line):
        """Test that malformed lines raise DecodeError"""
        with pytest.raises(DecodeError):
            records.decode(line)
