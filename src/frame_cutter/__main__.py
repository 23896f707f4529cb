"""Launch the Frame Cutter window with ``python -m frame_cutter``."""
from .gui import main

if __name__ == "__main__":
    main()
