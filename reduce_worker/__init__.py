"""
Reduce task executor for a MapReduce-style batch system
"""

from reduce_worker.config import ReduceTaskConfig
from reduce_worker.errors import (
    DecodeError,
    FlushError,
    IntermediateReadError,
    MissingInputError,
    OutputCreateError,
    ReduceFunctionError,
    ReduceTaskError,
)
from reduce_worker.naming import intermediate_files, merge_name, reduce_name
from reduce_worker.records import KeyValue
from reduce_worker.reduce_executor import (
    DecodeWarning,
    ReduceExecutor,
    ReduceResult,
    TaskState,
)

__all__ = [
    'DecodeError',
    'DecodeWarning',
    'FlushError',
    'IntermediateReadError',
    'KeyValue',
    'MissingInputError',
    'OutputCreateError',
    'ReduceExecutor',
    'ReduceFunctionError',
    'ReduceResult',
    'ReduceTaskConfig',
    'ReduceTaskError',
    'TaskState',
    'intermediate_files',
    'merge_name',
    'reduce_name',
]
