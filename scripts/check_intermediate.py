#!/usr/bin/env python3
"""
Quick utility script to check the intermediate files a reduce task will read.

Usage:
    python3 scripts/check_intermediate.py --job-name wc --num-map 4 --reduce-task 0 [--intermediate-dir DIR]
"""

import os
import sys
import argparse

from reduce_worker import records
from reduce_worker.errors import DecodeError
from reduce_worker.naming import intermediate_files


def inspect_file(path: str) -> dict:
    """Count valid and malformed records in one intermediate file."""
    summary = {'records': 0, 'malformed': 0, 'keys': set(), 'bytes': os.path.getsize(path)}
    with open(path, 'rb') as f:
        for raw in f:
            if not raw.strip():
                continue
            try:
                kv = records.decode(raw)
            except DecodeError:
                summary['malformed'] += 1
                continue
            summary['records'] += 1
            summary['keys'].add(kv.key)
    return summary


def check_intermediate_files(job_name: str, num_map: int, reduce_task: int,
                             intermediate_dir: str = None) -> bool:
    """Check and display every intermediate file addressed to one reduce task."""
    paths = intermediate_files(job_name, num_map, reduce_task, intermediate_dir)
    print(f"Reduce task {reduce_task} of job {job_name}: expecting {len(paths)} file(s)\n")

    ok = True
    all_keys = set()
    total_records = 0
    for map_task, path in enumerate(paths):
        if not os.path.isfile(path):
            print(f"❌ Map task {map_task}: missing {path}")
            ok = False
            continue

        summary = inspect_file(path)
        total_records += summary['records']
        all_keys |= summary['keys']
        marker = '⚠️ ' if summary['malformed'] else '✅'
        print(f"{marker} Map task {map_task}: {summary['records']} records, "
              f"{summary['malformed']} malformed, {summary['bytes']} bytes")

    print(f"\n  Total: {total_records} records, {len(all_keys)} distinct keys")
    return ok


if __name__ == '__main__':
    parser = argparse.ArgumentParser(
        description='Check the intermediate files addressed to a reduce task'
    )
    parser.add_argument('--job-name', required=True, help='Name of the MapReduce job')
    parser.add_argument('--num-map', type=int, required=True, help='Number of map tasks')
    parser.add_argument('--reduce-task', type=int, default=0, help='Reduce task index')
    parser.add_argument('--intermediate-dir', help='Directory holding the intermediate files')

    args = parser.parse_args()

    success = check_intermediate_files(args.job_name, args.num_map, args.reduce_task,
                                       args.intermediate_dir)
    if not success:
        print(f"\n❌ Reduce task {args.reduce_task} would fail: intermediate files are missing.")
    sys.exit(0 if success else 1)
