#!/usr/bin/env python3
"""Run the narration worker.

    python cli/run_worker.py           # long-running
    python cli/run_worker.py --burst   # drain queued narration jobs, then exit
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from arq import run_worker

from storyforest.worker import WorkerSettings


def main():
    parser = argparse.ArgumentParser(description="Run the Storyforest narration worker")
    parser.add_argument("--burst", action="store_true", help="Exit once the queue is empty")
    args = parser.parse_args()

    run_worker(WorkerSettings, burst=args.burst)


if __name__ == "__main__":
    main()
