"""S3 Select client wrapper.

This module provides an async wrapper around aioboto3 for running
SelectObjectContent against a single CSV object.
"""

from typing import Any, AsyncIterator, Dict, Optional

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, EventStreamError
import structlog

from search.src.config import StorageConfig
from search.src.utils.errors import QueryExecutionError, StreamError

logger = structlog.get_logger(__name__)

INPUT_SERIALIZATION: Dict[str, Any] = {
    "CompressionType": "NONE",
    "CSV": {
        "FileHeaderInfo": "USE",
        "FieldDelimiter": ",",
        "AllowQuotedRecordDelimiter": True,
    },
}

OUTPUT_SERIALIZATION: Dict[str, Any] = {
    "CSV": {
        "FieldDelimiter": ",",
    },
}


class S3SelectClient:
    """Async S3 Select client using aioboto3."""

    def __init__(
        self,
        bucket: str,
        key: str,
        region: str = "ap-northeast-1",
        endpoint_url: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        session: Optional[aioboto3.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            bucket: Bucket holding the dataset
            key: Object key of the CSV dataset
            region: AWS region
            endpoint_url: Optional endpoint for S3-compatible stores
            access_key: Access key ID (None uses the default credential chain)
            secret_key: Secret access key
            session: Optional pre-built aioboto3 session
        """
        self.bucket = bucket
        self.key = key
        self.region = region
        self.endpoint_url = endpoint_url
        self.access_key = access_key
        self.secret_key = secret_key

        # Failures surface immediately, no retries
        self.config = Config(
            retries={
                'max_attempts': 1,
                'mode': 'standard'
            }
        )

        self.session = session or aioboto3.Session()

    @classmethod
    def from_config(cls, config: StorageConfig) -> "S3SelectClient":
        """Build a client from storage configuration."""
        return cls(
            bucket=config.bucket,
            key=config.key,
            region=config.region,
            endpoint_url=config.endpoint_url,
            access_key=config.access_key,
            secret_key=config.secret_key,
        )

    def get_client(self):
        """
        Get an async S3 client context manager.

        Usage:
            async with select_client.get_client() as s3:
                await s3.select_object_content(...)
        """
        return self.session.client(
            's3',
            endpoint_url=self.endpoint_url,
            aws_access_key_id=self.access_key,
            aws_secret_access_key=self.secret_key,
            region_name=self.region,
            config=self.config
        )

    async def select_records(self, expression: str) -> AsyncIterator[bytes]:
        """
        Run a SQL expression against the dataset object.

        Yields the payload of every Records event in arrival order. The
        generator is single-use; the S3 client is closed when it finishes
        or is closed early.

        Args:
            expression: S3 Select SQL expression

        Raises:
            QueryExecutionError: If the request is rejected or cannot be sent
            StreamError: If the event stream fails or ends without an End event
        """
        async with self.get_client() as s3:
            try:
                response = await s3.select_object_content(
                    Bucket=self.bucket,
                    Key=self.key,
                    ExpressionType='SQL',
                    Expression=expression,
                    RequestProgress={'Enabled': False},
                    InputSerialization=INPUT_SERIALIZATION,
                    OutputSerialization=OUTPUT_SERIALIZATION,
                )
            except (ClientError, BotoCoreError) as e:
                logger.error(
                    "select_request_failed",
                    bucket=self.bucket,
                    key=self.key,
                    error=str(e)
                )
                raise QueryExecutionError(str(e)) from e

            logger.debug(
                "select_request_accepted",
                bucket=self.bucket,
                key=self.key,
                expression=expression
            )

            ended = False
            total_bytes = 0
            try:
                async for event in response['Payload']:
                    if 'Records' in event:
                        payload = event['Records']['Payload']
                        total_bytes += len(payload)
                        yield payload
                    elif 'Stats' in event:
                        logger.debug("select_stats", **event['Stats'].get('Details', {}))
                    elif 'Progress' in event:
                        logger.debug("select_progress", **event['Progress'].get('Details', {}))
                    elif 'Cont' in event:
                        logger.debug("select_keepalive")
                    elif 'End' in event:
                        ended = True
            except EventStreamError as e:
                logger.error(
                    "select_stream_failed",
                    bucket=self.bucket,
                    key=self.key,
                    error=str(e)
                )
                raise StreamError(str(e)) from e

            if not ended:
                logger.error(
                    "select_stream_truncated",
                    bucket=self.bucket,
                    key=self.key,
                    size_bytes=total_bytes
                )
                raise StreamError("event stream ended without an End event")

            logger.debug(
                "select_stream_finished",
                bucket=self.bucket,
                key=self.key,
                size_bytes=total_bytes
            )
