"""
Pytest configuration for the fleet tool tests.

The CLI modules live flat under src/ (not as an installed package), so src/
is put on sys.path for the unit tests to import them by module name.
"""

import os
import sys

ROOT_DIR = os.path.dirname(os.path.abspath(__file__))
SRC_DIR = os.path.join(ROOT_DIR, "src")

if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)
