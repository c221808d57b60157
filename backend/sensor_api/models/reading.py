"""
Sensor Reading Models
=====================
Pydantic models for request validation and response serialization.

A reading is one row of the sensor_readings table:

    id | date       | time     | temperature | humidity
    ---+------------+----------+-------------+---------
     1 | 2017-12-22 | 08:15:00 |        21.5 |     40.0

REQUEST MODELS:
    CreateReadingRequest   - POST   /sensor-readings
    UpdateReadingRequest   - PUT    /sensor-readings
    DeleteReadingRequest   - DELETE /sensor-readings
    UpdateReadingByIdRequest - PUT  /sensor-readings/{id}

RESPONSE MODELS:
    SensorReading          - one row as returned to the caller
"""

from datetime import date as Date, time as Time
from typing import Optional

from pydantic import BaseModel, Field


# =============================================================================
# REQUEST MODELS - What the client sends
# =============================================================================

class ReadingMatch(BaseModel):
    """
    The (date, temperature, humidity) triple.

    Used both to create a reading and to find existing readings by value.
    Several rows can share the same triple - matching is by value, not
    identity.
    """
    date: Date = Field(
        ...,
        description="Date of the reading (format: YYYY-MM-DD)",
        examples=["2017-12-22"]
    )
    temperature: float = Field(
        ...,
        description="Temperature value",
        examples=[21.5]
    )
    humidity: float = Field(
        ...,
        description="Relative humidity value",
        examples=[40]
    )


class CreateReadingRequest(ReadingMatch):
    """
    Request body for storing a new reading.

    Example Request:
        POST /sensor-readings
        {
            "date": "2024-01-01",
            "temperature": 21.5,
            "humidity": 40
        }
    """
    time: Optional[Time] = Field(
        None,
        description="Time of day (HH:MM:SS). Defaults to the database's current time.",
        examples=["08:15:00"]
    )


class UpdateReadingRequest(ReadingMatch):
    """
    Request body for updating readings by value.

    date/temperature/humidity select WHICH rows to update. new_temperature
    and new_humidity are the values to write. If they are left out, the
    matched values are written back unchanged (so the call only confirms
    that nothing failed).

    Example Request:
        PUT /sensor-readings
        {
            "date": "2024-01-01",
            "temperature": 21.5,
            "humidity": 40,
            "new_temperature": 22.0,
            "new_humidity": 38
        }
    """
    new_temperature: Optional[float] = Field(
        None,
        description="Temperature to write (default: keep the matched temperature)"
    )
    new_humidity: Optional[float] = Field(
        None,
        description="Humidity to write (default: keep the matched humidity)"
    )


class DeleteReadingRequest(ReadingMatch):
    """Request body for deleting every reading with this exact triple."""


class UpdateReadingByIdRequest(BaseModel):
    """Request body for updating one reading by its id."""
    temperature: float = Field(..., description="New temperature value")
    humidity: float = Field(..., description="New humidity value")


# =============================================================================
# RESPONSE MODELS - What we send back
# =============================================================================

class SensorReading(BaseModel):
    """One row of the sensor_readings table."""
    id: int = Field(..., description="Surrogate identifier")
    date: Date = Field(..., description="Date of the reading")
    time: Optional[Time] = Field(None, description="Time of day of the reading")
    temperature: float = Field(..., description="Temperature value")
    humidity: float = Field(..., description="Relative humidity value")
