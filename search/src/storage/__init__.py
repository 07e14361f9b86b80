"""Object storage access for the dataset."""

from .s3_select_client import S3SelectClient

__all__ = ["S3SelectClient"]
