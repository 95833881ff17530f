#!/usr/bin/env python3
"""
Command-line driver that runs a single reduce task
Arguments fall back to REDUCE_* environment variables
"""

import os
import sys
import logging
import argparse

from reduce_worker.config import ReduceTaskConfig, TRUE_VALUES
from reduce_worker.reduce_executor import ReduceExecutor

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def build_parser() -> argparse.ArgumentParser:
    env = os.environ
    parser = argparse.ArgumentParser(description='Run one MapReduce reduce task')
    parser.add_argument('--job-name', default=env.get('REDUCE_JOB_NAME', ''),
                        help='Name of the MapReduce job')
    parser.add_argument('--reduce-task', type=int, default=env.get('REDUCE_TASK', '0'),
                        help='Index of this reduce task')
    parser.add_argument('--num-map', type=int, default=env.get('REDUCE_NUM_MAP'),
                        help='Number of map tasks that were run')
    parser.add_argument('--output', default=env.get('REDUCE_OUTPUT'),
                        help='Output file (default: mrtmp.<job>-res-<reduce task>)')
    parser.add_argument('--intermediate-dir', default=env.get('REDUCE_INTERMEDIATE_DIR'),
                        help='Directory holding the intermediate files')
    parser.add_argument('--function-file', default=env.get('REDUCE_FUNCTION_FILE'),
                        help='Python file defining reduce_function(key, values)')
    parser.add_argument('--unsorted', action='store_true',
                        default=env.get('REDUCE_SORT_KEYS', 'true').lower() not in TRUE_VALUES,
                        help='Write keys in first-seen order instead of sorted order')
    parser.add_argument('--log-level', default=env.get('REDUCE_LOG_LEVEL', 'INFO'),
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')
    return parser


def main(argv=None) -> int:
    """Run the reduce task; returns the process exit code"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    if args.num_map is None:
        parser.error('--num-map (or REDUCE_NUM_MAP) is required')
    if not args.function_file:
        parser.error('--function-file (or REDUCE_FUNCTION_FILE) is required')

    try:
        config = ReduceTaskConfig(
            job_name=args.job_name,
            reduce_task=args.reduce_task,
            num_map=args.num_map,
            output_file=args.output,
            intermediate_dir=args.intermediate_dir,
            function_file=args.function_file,
            sort_keys=not args.unsorted,
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        executor = ReduceExecutor.from_config(config)
    except Exception as e:
        print(f"Cannot load reduce function: {e}", file=sys.stderr)
        return 1

    result = executor.execute()

    if result['success']:
        print(f"Reduce task {config.reduce_task}: wrote {result['stats'].get('keys', 0)} keys "
              f"to {result['output_file']} in {result['execution_time_ms']:.1f}ms "
              f"({len(result['warnings'])} malformed lines skipped)")
        return 0

    print(f"Reduce task {config.reduce_task} failed: {result['error_type']}: "
          f"{result['error_message']}", file=sys.stderr)
    return 1


if __name__ == '__main__':
    sys.exit(main())
