"""Fetch dataset rows through S3 Select and normalize them into Records.

The whole result is buffered before parsing: CSV row boundaries are only
known once every payload chunk has been concatenated in arrival order.
"""

import csv
import io
from contextlib import aclosing
from datetime import date, datetime
from typing import AsyncIterator, Callable, Iterator, List, Optional, Protocol, Tuple

import structlog

from search.src.models.record import (
    AGE_UNKNOWN,
    BIRTHDAY,
    BUST,
    CUP,
    HEIGHT,
    HIP,
    IMAGE,
    NAME,
    ROW_WIDTH,
    WEST,
    Record,
)
from search.src.utils.errors import RecordParseError

logger = structlog.get_logger(__name__)

BIRTHDAY_FORMAT = "%Y-%m-%d"
DIGITS_FORMAT = "%Y%m%d"


class SelectSource(Protocol):
    """Anything that can stream select results as byte chunks."""

    def select_records(self, expression: str) -> AsyncIterator[bytes]:
        ...


def calc_age(birthday: date, today: date) -> str:
    """
    Approximate age from YYYYMMDD digits.

    (today_digits - birthday_digits) / 10000, truncated toward zero. This
    is not calendar-exact.

    Args:
        birthday: Date of birth
        today: Reference date

    Returns:
        Age as a display string
    """
    diff = int(today.strftime(DIGITS_FORMAT)) - int(birthday.strftime(DIGITS_FORMAT))
    age = abs(diff) // 10000
    return str(-age if diff < 0 else age)


def _numbered_rows(reader) -> Iterator[Tuple[int, List[str]]]:
    row_number = 0
    try:
        for row in reader:
            row_number += 1
            yield row_number, row
    except csv.Error as e:
        raise RecordParseError(str(e), row_number + 1) from e


def parse_records(data: bytes, today: date) -> List[Record]:
    """
    Parse buffered CSV rows into Records.

    Args:
        data: Concatenated select payload
        today: Reference date for the age column

    Returns:
        Records in row order

    Raises:
        RecordParseError: On a short row or an unparseable birthday; no
            partial result is returned
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise RecordParseError(f"payload is not UTF-8: {e}", 0) from e

    reader = csv.reader(io.StringIO(text, newline=""), delimiter=",")
    records: List[Record] = []

    for row_number, row in _numbered_rows(reader):
        if not row:
            continue
        if len(row) < ROW_WIDTH:
            raise RecordParseError(
                f"expected {ROW_WIDTH} fields, got {len(row)}", row_number
            )

        raw_birthday = row[BIRTHDAY]
        if raw_birthday == "":
            age = AGE_UNKNOWN
        else:
            try:
                birthday = datetime.strptime(raw_birthday, BIRTHDAY_FORMAT).date()
                # strptime accepts one-digit month and day
                if birthday.isoformat() != raw_birthday:
                    raise ValueError("not in YYYY-MM-DD form")
            except ValueError as e:
                raise RecordParseError(
                    f"invalid birthday {raw_birthday!r}", row_number
                ) from e
            age = calc_age(birthday, today)

        records.append(
            Record(
                name=row[NAME],
                image=row[IMAGE],
                height=row[HEIGHT],
                age=age,
                bust=row[BUST],
                cup=row[CUP],
                west=row[WEST],
                hip=row[HIP],
            )
        )

    return records


class RecordReader:
    """Runs select expressions and turns the result into Records."""

    def __init__(self, source: SelectSource, clock: Optional[Callable[[], date]] = None):
        """
        Args:
            source: Select client, usually an S3SelectClient
            clock: Returns "today" for age calculation
        """
        self.source = source
        self.clock = clock or date.today

    async def fetch(self, expression: str) -> List[Record]:
        """
        Drain the select stream and parse the buffered rows.

        Args:
            expression: S3 Select SQL expression

        Returns:
            Records in dataset order
        """
        chunks: List[bytes] = []
        async with aclosing(self.source.select_records(expression)) as stream:
            async for chunk in stream:
                chunks.append(chunk)

        data = b"".join(chunks)
        records = parse_records(data, self.clock())

        logger.info(
            "records_fetched",
            count=len(records),
            chunks=len(chunks),
            size_bytes=len(data)
        )
        return records
