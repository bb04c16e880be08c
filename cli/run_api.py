#!/usr/bin/env python3
"""Serve the Storyforest API with uvicorn.

Narration endpoints need a reachable Redis (REDIS_URL); start
cli/run_worker.py alongside to process queued jobs.
"""

import argparse
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Serve the Storyforest API")
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8080")))
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload (production)")
    args = parser.parse_args()

    uvicorn.run(
        "storyforest.api.main:app",
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
        # Reload only on source changes, not on generated images or audio
        reload_dirs=[str(Path(__file__).parent.parent / "storyforest")] if not args.no_reload else None,
    )


if __name__ == "__main__":
    main()
