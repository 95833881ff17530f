"""
Unit tests for the intermediate file check script
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../../scripts'))

from check_intermediate import check_intermediate_files, inspect_file


class TestCheckIntermediate:
    """Tests for check_intermediate_files"""

    def test_counts_records_and_malformed_lines(self, write_intermediate):
        """Test that valid and malformed lines are counted separately"""
        path = write_intermediate('wc', 0, 0, [('a', '1'), 'garbage', ('b', '1'), ('a', '2')])

        summary = inspect_file(path)

        assert summary['records'] == 3
        assert summary['malformed'] == 1
        assert summary['keys'] == {'a', 'b'}

    def test_all_files_present(self, temp_dir, write_intermediate, capsys):
        """Test that the check passes when every map task wrote its file"""
        write_intermediate('wc', 0, 0, [('a', '1')])
        write_intermediate('wc', 1, 0, [('b', '1')])

        assert check_intermediate_files('wc', 2, 0, temp_dir) is True
        assert '2 distinct keys' in capsys.readouterr().out

    def test_missing_file_fails(self, temp_dir, write_intermediate, capsys):
        """Test that the check fails when a map task's file is missing"""
        write_intermediate('wc', 0, 0, [('a', '1')])

        assert check_intermediate_files('wc', 2, 0, temp_dir) is False
        assert 'mrtmp.wc-1-0' in capsys.readouterr().out
