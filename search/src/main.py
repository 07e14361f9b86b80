"""Lambda entry point for the dataset search function.

API Gateway invokes `lambda_handler` with a proxy event; `params` in the
query string carries a comma separated list of filter tags.
"""

import asyncio
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional
from zoneinfo import ZoneInfo

import structlog
from pydantic_core import PydanticSerializationError

from shared.logging.structured_logger import bind_context, clear_context, configure_logging
from search.src.config import Settings, get_settings
from search.src.models.record import dump_records
from search.src.query.builder import build_expression, build_predicate
from search.src.reader.record_reader import RecordReader, SelectSource
from search.src.storage.s3_select_client import S3SelectClient
from search.src.utils.errors import SerializationError, classify_error

logger = structlog.get_logger(__name__)

PARAMS_KEY = "params"

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


def parse_tags(query: Optional[Mapping[str, str]]) -> List[str]:
    """Split the `params` query value into filter tags; absent or empty means none."""
    raw = (query or {}).get(PARAMS_KEY) or ""
    if raw == "":
        return []
    return raw.split(",")


def success_response(body: str) -> Dict[str, Any]:
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json", **CORS_HEADERS},
        "body": body,
        "isBase64Encoded": False,
    }


def error_response() -> Dict[str, Any]:
    return {
        "statusCode": 500,
        "headers": {"Content-Type": "text/plain", **CORS_HEADERS},
        "body": "Internal Server Error",
        "isBase64Encoded": False,
    }


async def run_search(tags: List[str], source: SelectSource, clock: Callable[[], date]) -> str:
    """
    Run one search and return the JSON body.

    Raises:
        SearchError: From any stage of the pipeline
    """
    today = clock()
    predicate = build_predicate(tags, today=today)
    expression = build_expression(predicate)
    logger.info("select_expression_built", tags=tags, expression=expression)

    records = await RecordReader(source, clock=lambda: today).fetch(expression)

    try:
        return dump_records(records).decode("utf-8")
    except (PydanticSerializationError, ValueError, TypeError) as e:
        raise SerializationError(str(e)) from e


async def handle_request(
    query: Optional[Mapping[str, str]],
    source: SelectSource,
    clock: Callable[[], date],
) -> Dict[str, Any]:
    """
    Turn query string parameters into an API Gateway proxy response.

    Every failure produces the same generic 500; details only go to the log.
    """
    tags = parse_tags(query)
    try:
        body = await run_search(tags, source, clock)
    except Exception as e:
        logger.error(
            "search_failed",
            error=str(e),
            error_type=type(e).__name__,
            error_category=classify_error(e).value,
            exc_info=True
        )
        return error_response()

    return success_response(body)


def make_clock(timezone: str) -> Callable[[], date]:
    """Today's date in the given IANA time zone."""
    zone = ZoneInfo(timezone)
    return lambda: datetime.now(zone).date()


def lambda_handler(event: Dict[str, Any], context: Any, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Lambda entrypoint (inputs: proxy event/context; output: proxy response dict)."""
    settings = settings or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.json_logs,
        service_name=settings.service_name,
        environment=settings.environment,
    )

    clear_context()
    query = event.get("queryStringParameters") or {}
    bind_context(
        request_id=getattr(context, "aws_request_id", None),
        params=query.get(PARAMS_KEY),
    )

    try:
        source = S3SelectClient.from_config(settings.storage)
        clock = make_clock(settings.timezone)
    except Exception as e:
        logger.error("search_setup_failed", error=str(e), exc_info=True)
        return error_response()

    return asyncio.run(handle_request(query, source, clock))
