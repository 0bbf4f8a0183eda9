"""
Pytest configuration file.

Puts the project root on the Python path so the top-level modules
(main, commute_summary, workbook_reader, config) import during tests.
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))
