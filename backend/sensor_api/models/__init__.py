"""
Models Package
==============

Pydantic models for the sensor readings API.
"""

from .reading import (
    ReadingMatch,
    CreateReadingRequest,
    UpdateReadingRequest,
    DeleteReadingRequest,
    UpdateReadingByIdRequest,
    SensorReading,
)

__all__ = [
    "ReadingMatch",
    "CreateReadingRequest",
    "UpdateReadingRequest",
    "DeleteReadingRequest",
    "UpdateReadingByIdRequest",
    "SensorReading",
]
