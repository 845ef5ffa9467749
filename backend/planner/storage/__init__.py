"""
Persistence backends behind a single storage interface.
"""
from planner.storage.base import Storage
from planner.storage.json_files import JsonFileStorage
from planner.storage.sql import SqlStorage

__all__ = ["Storage", "SqlStorage", "JsonFileStorage"]
