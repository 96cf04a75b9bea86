"""Test configuration for pytest.

Ensure the repository root is on sys.path so tests can import the top-level
modules without needing PYTHONPATH set externally.
"""
import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
