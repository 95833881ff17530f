"""
Reduce Task Executor
Executes one reduce task by reading the intermediate files of every map task,
grouping values by key, applying the reduce function once per key, and
writing the final output for the partition
"""

import os
import time
import logging
from enum import Enum
from dataclasses import dataclass, field, asdict
from typing import Callable, Dict, List, Optional

import psutil

from reduce_worker import records
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
from reduce_worker.function_loader import FunctionLoader
from reduce_worker.naming import intermediate_files

logger = logging.getLogger(__name__)

ReduceFunction = Callable[[str, List[str]], str]


class TaskState(Enum):
    IDLE = 'IDLE'
    READING = 'READING'
    GROUPING = 'GROUPING'
    REDUCING = 'REDUCING'
    WRITING = 'WRITING'
    DONE = 'DONE'
    FAILED = 'FAILED'


_STATE_ORDER = [TaskState.IDLE, TaskState.READING, TaskState.GROUPING,
                TaskState.REDUCING, TaskState.WRITING, TaskState.DONE]


@dataclass
class DecodeWarning:
    """A line that was skipped because it could not be decoded"""
    path: str
    line_number: int
    message: str


@dataclass
class ReduceResult:
    """Outcome of a successful reduce task"""
    output_file: str
    keys: int
    warnings: List[DecodeWarning] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)


class ReduceExecutor:
    """Executes a single reduce task"""

    def __init__(self, job_name: str, reduce_task: int, num_map: int,
                 output_file: str, reduce_function: ReduceFunction,
                 intermediate_dir: Optional[str] = None, sort_keys: bool = True):
        """
        Initialize the reduce executor

        Args:
            job_name: Name of the whole MapReduce job
            reduce_task: Index of the partition this task is responsible for
            num_map: Number of map tasks that were run
            output_file: Path the reduce output is written to
            reduce_function: Callable (key, values) -> str
            intermediate_dir: Directory holding the intermediate files
            sort_keys: Reduce and write keys in sorted order; when False keys
                are processed in the order they were first seen
        """
        self.job_name = job_name
        self.reduce_task = reduce_task
        self.num_map = num_map
        self.output_file = output_file
        self.reduce_function = reduce_function
        self.intermediate_dir = intermediate_dir
        self.sort_keys = sort_keys

        self.state = TaskState.IDLE
        self.warnings: List[DecodeWarning] = []
        self.stats: Dict[str, int] = {}
        self._process = psutil.Process()

    @classmethod
    def from_config(cls, config: ReduceTaskConfig,
                    reduce_function: Optional[ReduceFunction] = None) -> 'ReduceExecutor':
        """
        Build an executor from a config, loading the reduce function from
        `config.function_file` when none is given
        """
        if reduce_function is None:
            if not config.function_file:
                raise ValueError("No reduce function given and no function_file configured")
            reduce_function = FunctionLoader(config.function_file).get_reduce_function()

        return cls(
            job_name=config.job_name,
            reduce_task=config.reduce_task,
            num_map=config.num_map,
            output_file=config.output_file,
            reduce_function=reduce_function,
            intermediate_dir=config.intermediate_dir,
            sort_keys=config.sort_keys,
        )

    @property
    def input_files(self) -> List[str]:
        return intermediate_files(self.job_name, self.num_map, self.reduce_task,
                                  self.intermediate_dir)

    def _set_state(self, state: TaskState):
        if self.state in (TaskState.DONE, TaskState.FAILED):
            raise RuntimeError(f"Reduce task {self.reduce_task} already finished ({self.state.value})")
        if state is not TaskState.FAILED:
            if _STATE_ORDER.index(state) <= _STATE_ORDER.index(self.state):
                raise RuntimeError(
                    f"Reduce task {self.reduce_task}: illegal transition "
                    f"{self.state.value} -> {state.value}")
        logger.debug(f"Reduce task {self.reduce_task}: {self.state.value} -> {state.value}")
        self.state = state

    def run(self) -> ReduceResult:
        """
        Run the reduce task

        Returns:
            ReduceResult describing the written output

        Raises:
            MissingInputError: An intermediate file could not be opened
            IntermediateReadError: Reading an intermediate file failed
            ReduceFunctionError: The reduce function failed for some key
            OutputCreateError: The output file could not be created
            FlushError: Writing the output file failed
            RuntimeError: The executor has already been run
        """
        if self.state is not TaskState.IDLE:
            raise RuntimeError(
                f"Reduce task {self.reduce_task} cannot be re-run from state {self.state.value}")

        try:
            logger.info(f"Reduce task {self.reduce_task}: Reading and grouping intermediate data "
                        f"from {self.num_map} map tasks")
            key_groups = self._read_and_group_intermediate()
            logger.info(f"Reduce task {self.reduce_task}: Grouped {len(key_groups)} unique keys")

            self._set_state(TaskState.REDUCING)
            results = self._apply_reduce(key_groups)

            self._set_state(TaskState.WRITING)
            self._write_output(results)
        except Exception:
            self._set_state(TaskState.FAILED)
            raise

        self._set_state(TaskState.DONE)
        self.stats['keys'] = len(results)
        logger.info(f"Reduce task {self.reduce_task}: Wrote {len(results)} keys to {self.output_file}")

        return ReduceResult(
            output_file=self.output_file,
            keys=len(results),
            warnings=list(self.warnings),
            stats=dict(self.stats),
        )

    def execute(self) -> dict:
        """
        Run the reduce task and report its outcome instead of raising

        Returns:
            Dictionary with 'success', 'execution_time_ms', 'error_message',
            'error_type', 'output_file', 'warnings' and 'stats' fields
        """
        start_time = time.perf_counter()
        error_message = ''
        error_type = ''

        try:
            self.run()
        except ReduceTaskError as e:
            error_type = type(e).__name__
            error_message = str(e)
            logger.error(f"Reduce task {self.reduce_task} failed: {error_message}")
        except Exception as e:
            error_type = type(e).__name__
            error_message = str(e)
            logger.exception(f"Reduce task {self.reduce_task} failed unexpectedly")

        execution_time = (time.perf_counter() - start_time) * 1000
        return {
            'success': not error_type,
            'execution_time_ms': execution_time,
            'error_message': error_message,
            'error_type': error_type,
            'output_file': self.output_file,
            'warnings': [asdict(w) for w in self.warnings],
            'stats': dict(self.stats),
        }

    def _read_and_group_intermediate(self) -> Dict[str, List[str]]:
        """
        Read all intermediate files and group values by key

        Returns:
            Dictionary mapping key to its values, in map-task then line order
        """
        key_groups: Dict[str, List[str]] = {}
        self.stats.update(files_read=0, records_read=0, lines_skipped=0)

        self._set_state(TaskState.READING)
        for path in self.input_files:
            for kv in self._read_intermediate_file(path):
                key_groups.setdefault(kv.key, []).append(kv.value)
                self.stats['records_read'] += 1
            self.stats['files_read'] += 1

        self._set_state(TaskState.GROUPING)
        self.stats['memory_rss_bytes'] = self._process.memory_info().rss
        logger.info(f"Reduce task {self.reduce_task}: Read {self.stats['files_read']} files, "
                    f"processed {self.stats['records_read']} records, "
                    f"skipped {self.stats['lines_skipped']} malformed records")
        return key_groups

    def _read_intermediate_file(self, path: str):
        """
        Yield the decodable records of one intermediate file

        Malformed lines are logged, recorded in `self.warnings` and skipped.
        """
        try:
            f = open(path, 'rb')
        except OSError as e:
            raise MissingInputError(path, e.strerror or str(e)) from e

        with f:
            try:
                for line_number, raw in enumerate(f, start=1):
                    line = raw.rstrip(b'\n').rstrip(b'\r')
                    if not line.strip(b' \t\r\n'):
                        continue
                    try:
                        kv = records.decode(line)
                    except DecodeError as e:
                        self.stats['lines_skipped'] += 1
                        self.warnings.append(DecodeWarning(path, line_number, str(e)))
                        logger.warning(f"Reduce task {self.reduce_task}: Skipping malformed line "
                                       f"{line_number} in {path}: {e}")
                        continue
                    yield kv
            except OSError as e:
                raise IntermediateReadError(path, str(e)) from e

    def _apply_reduce(self, key_groups: Dict[str, List[str]]) -> Dict[str, str]:
        """
        Call the reduce function exactly once per key

        Returns:
            Dictionary mapping key to reduced value, in output order
        """
        keys = sorted(key_groups) if self.sort_keys else list(key_groups)
        results: Dict[str, str] = {}

        for key in keys:
            try:
                result = self.reduce_function(key, key_groups[key])
            except Exception as e:
                raise ReduceFunctionError(key, f"{type(e).__name__}: {e}") from e
            if not isinstance(result, str):
                raise ReduceFunctionError(key, f"expected str result, got {type(result).__name__}")
            results[key] = result

        return results

    def _write_output(self, results: Dict[str, str]):
        """
        Write reduce output, one record per key, and sync it to disk

        Args:
            results: Dictionary mapping key to reduced value
        """
        try:
            output_dir = os.path.dirname(self.output_file)
            if output_dir:
                os.makedirs(output_dir, exist_ok=True)
            f = open(self.output_file, 'w', encoding='utf-8', newline='\n')
        except OSError as e:
            raise OutputCreateError(self.output_file, e.strerror or str(e)) from e

        try:
            with f:
                for key, value in results.items():
                    f.write(records.encode(key, value) + '\n')
                f.flush()
                os.fsync(f.fileno())
        except (OSError, UnicodeEncodeError) as e:
            raise FlushError(self.output_file, str(e)) from e
