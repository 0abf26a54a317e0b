#!/usr/bin/env python3
"""
vlist demo launcher script.

Run this from the project root to open the virtualized table demo.
"""

import sys
from pathlib import Path

# Make the vlist package importable without installing it
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

if __name__ == '__main__':
    from vlist.run_gui import main
    main()
