"""
Polling-unit registry import.

Loads the national polling-unit CSV into the states → LGAs → wards hierarchy,
creating any LGA or ward the registry mentions that the database lacks.
"""
from pu_import.orchestrator import import_file, run_import

__all__ = ['import_file', 'run_import']
