#!/usr/bin/env python3
"""
Main CLI entrypoint for the Slideshow Video Service.

This is a convenience wrapper that imports and runs the pipeline CLI.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from slideshow.pipelines.run_pipeline import main

if __name__ == "__main__":
    sys.exit(main())
