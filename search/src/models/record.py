"""Response models for the search function."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# Positional layout of the dataset rows
NAME, IMAGE, HEIGHT, BIRTHDAY, BUST, CUP, WEST, HIP = range(8)
ROW_WIDTH = 8

AGE_UNKNOWN = "-"


class Record(BaseModel):
    """One normalized dataset row, every field a display string.

    Field order is the JSON key order of the response.
    """

    name: str = Field(..., description="Display name")
    image: str = Field(..., description="Image reference")
    height: str = Field(..., description="Height in cm")
    age: str = Field(..., description="Derived age, or '-' when the birthday is unknown")
    bust: str = Field(..., description="Bust in cm")
    cup: str = Field(..., description="Cup letter")
    west: str = Field(..., description="Waist in cm")
    hip: str = Field(..., description="Hip in cm")

    model_config = ConfigDict(frozen=True)


RecordList = TypeAdapter(List[Record])


def dump_records(records: List[Record]) -> bytes:
    """Encode records as a compact JSON array with UTF-8 text left unescaped."""
    return RecordList.dump_json(records)
