"""Pydantic models for the search function."""

from .record import AGE_UNKNOWN, ROW_WIDTH, Record, RecordList, dump_records

__all__ = ["Record", "RecordList", "dump_records", "AGE_UNKNOWN", "ROW_WIDTH"]
