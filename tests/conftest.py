"""
Pytest configuration and shared fixtures
"""

import pytest
import os
import tempfile
import shutil

from reduce_worker import records
from reduce_worker.naming import reduce_name

EXAMPLES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'examples')


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files"""
    dirpath = tempfile.mkdtemp()
    yield dirpath
    shutil.rmtree(dirpath)


@pytest.fixture
def write_intermediate(temp_dir):
    """
    Return a helper that writes one intermediate file for (job, map, reduce)

    `lines` may mix (key, value) tuples, which are encoded, and raw strings,
    which are written as-is.
    """
    def _write(job_name, map_task, reduce_task, lines):
        path = os.path.join(temp_dir, reduce_name(job_name, map_task, reduce_task))
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            for line in lines:
                if isinstance(line, tuple):
                    line = records.encode(*line)
                f.write(line + '\n')
        return path
    return _write


@pytest.fixture
def read_output():
    """Return a helper that decodes an output file into a list of (key, value)"""
    def _read(path):
        with open(path, 'r', encoding='utf-8') as f:
            return [tuple(records.decode(line)) for line in f if line.strip()]
    return _read


@pytest.fixture
def wordcount_job_file():
    """Path to word count example job file"""
    return os.path.join(EXAMPLES_DIR, 'wordcount.py')


@pytest.fixture
def inverted_index_job_file():
    """Path to inverted index example job file"""
    return os.path.join(EXAMPLES_DIR, 'inverted_index.py')
