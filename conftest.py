"""
Pytest configuration file.

Adds the project root to the Python path so tests import the local
`patterns` package without installing it.
"""

import sys
import os

_project_root = os.path.dirname(os.path.abspath(__file__))

if _project_root not in sys.path:
    sys.path.insert(0, _project_root)
