#!/usr/bin/env python3
"""Frame Cutter - cut clips from a video using a list of frame ranges."""

import sys
from pathlib import Path

# Run from a source checkout without installing
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from frame_cutter.gui import main

if __name__ == "__main__":
    main()
