"""
Reduce task configuration
"""

import os
from dataclasses import dataclass
from typing import Optional

from reduce_worker.naming import merge_name

TRUE_VALUES = ('1', 'true', 'yes', 'on')


@dataclass
class ReduceTaskConfig:
    """Everything needed to run one reduce task"""
    job_name: str
    reduce_task: int
    num_map: int
    output_file: Optional[str] = None
    intermediate_dir: Optional[str] = None
    function_file: Optional[str] = None
    sort_keys: bool = True

    def __post_init__(self):
        if not self.job_name:
            raise ValueError("job_name must not be empty")
        if self.reduce_task < 0:
            raise ValueError(f"reduce_task must be >= 0, got {self.reduce_task}")
        if self.num_map < 0:
            raise ValueError(f"num_map must be >= 0, got {self.num_map}")
        if not self.output_file:
            self.output_file = merge_name(self.job_name, self.reduce_task)

    @classmethod
    def from_env(cls, environ=None) -> 'ReduceTaskConfig':
        """
        Build a config from REDUCE_* environment variables

        Raises:
            ValueError: If a required variable is missing or malformed
        """
        env = os.environ if environ is None else environ

        job_name = env.get('REDUCE_JOB_NAME', '')
        try:
            reduce_task = int(env.get('REDUCE_TASK', 0))
            num_map = int(env['REDUCE_NUM_MAP'])
        except KeyError:
            raise ValueError("REDUCE_NUM_MAP must be set") from None

        return cls(
            job_name=job_name,
            reduce_task=reduce_task,
            num_map=num_map,
            output_file=env.get('REDUCE_OUTPUT') or None,
            intermediate_dir=env.get('REDUCE_INTERMEDIATE_DIR') or None,
            function_file=env.get('REDUCE_FUNCTION_FILE') or None,
            sort_keys=env.get('REDUCE_SORT_KEYS', 'true').lower() in TRUE_VALUES,
        )
