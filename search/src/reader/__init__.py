"""Dataset row fetching and normalization."""

from .record_reader import RecordReader, calc_age, parse_records

__all__ = ["RecordReader", "calc_age", "parse_records"]
