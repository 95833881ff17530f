"""
File naming conventions shared with the map side and the output merger
"""

import os
from typing import List, Optional


def reduce_name(job_name: str, map_task: int, reduce_task: int) -> str:
    """Name of the intermediate file map task `map_task` wrote for `reduce_task`"""
    return f"mrtmp.{job_name}-{map_task}-{reduce_task}"


def merge_name(job_name: str, reduce_task: int) -> str:
    """Conventional name of the output file for `reduce_task`"""
    return f"mrtmp.{job_name}-res-{reduce_task}"


def intermediate_files(job_name: str, num_map: int, reduce_task: int,
                       intermediate_dir: Optional[str] = None) -> List[str]:
    """
    Paths of all intermediate files addressed to one reduce task, in map order

    Args:
        job_name: Name of the whole MapReduce job
        num_map: Number of map tasks that were run
        reduce_task: Index of the reduce task
        intermediate_dir: Directory holding the files, or None for the cwd

    Returns:
        List of `num_map` file paths, map task 0 first
    """
    names = [reduce_name(job_name, m, reduce_task) for m in range(num_map)]
    if intermediate_dir:
        names = [os.path.join(intermediate_dir, name) for name in names]
    return names
