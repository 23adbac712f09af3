"""Data sources that supply loan book snapshots."""

from coop_reports.sources.base import DataSource
from coop_reports.sources.json_file import JsonFileSource, write_snapshot
from coop_reports.sources.memory import InMemorySource

__all__ = ["DataSource", "InMemorySource", "JsonFileSource", "write_snapshot"]
