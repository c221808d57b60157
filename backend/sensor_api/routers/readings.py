"""
Sensor Readings Router
======================

All the endpoints that touch the sensor_readings table.

HOW IT WORKS:
------------
1. FastAPI parses the query string / JSON body (pydantic checks the shape)
2. We build ONE parameterized SQL statement
3. We run it through the Database pool
4. We send back JSON (or a short confirmation text)

If the database fails, the caller only ever sees a generic message with a
500 status. The real error goes to the server log.

ALL ENDPOINTS:
-------------
GET    /sensor-readings             - List readings (paginated, optional date filter)
GET    /sensor-readings/procedure   - Readings for a date via get_sensor_readings_by_date()
POST   /sensor-readings             - Add a reading
PUT    /sensor-readings             - Update readings matching date/temperature/humidity
DELETE /sensor-readings             - Delete readings matching date/temperature/humidity

GET    /sensor-readings/{id}        - Get one reading
PUT    /sensor-readings/{id}        - Update one reading
DELETE /sensor-readings/{id}        - Delete one reading

The by-value PUT/DELETE affect EVERY matching row. Use the {id} endpoints
to touch exactly one.
"""

import logging
from datetime import date as Date
from typing import Optional

import psycopg2
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from sensor_api.database import Database, DatabaseError
from sensor_api.models import (
    CreateReadingRequest,
    UpdateReadingRequest,
    DeleteReadingRequest,
    UpdateReadingByIdRequest,
    SensorReading,
)
from sensor_api.utils import pagination_window, parse_optional_date

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/sensor-readings", tags=["sensor-readings"])

# Anything the database layer can throw at us
BACKEND_ERRORS = (psycopg2.Error, DatabaseError)

NOT_FOUND = "Sensor reading not found"


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================

def get_database(request: Request) -> Database:
    """
    Get the connection pool for use in endpoints.

    The pool is created at startup and lives on app.state.db. Tests swap
    this dependency out for a fake.
    """
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise HTTPException(status_code=500, detail="Server not fully started yet")
    return db


def server_error(message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=500)


# =============================================================================
# LIST / QUERY
# =============================================================================

@router.get("", response_model=list[SensorReading])
def list_readings(
    date: Optional[str] = Query(
        None,
        description="Only readings from this date (format: YYYY-MM-DD). Example: 2017-12-22. Empty means no filter."
    ),
    page: Optional[str] = Query(
        None,
        description="Page number for pagination (default is 1)."
    ),
    limit: Optional[str] = Query(
        None,
        description="Number of records per page (default is 100)."
    ),
    db: Database = Depends(get_database),
):
    """
    Retrieve sensor readings with pagination.

    Without a date (or with an empty one) you get ALL readings, a page
    at a time. Readings are ordered by time of day.

    page/limit that aren't positive whole numbers are ignored and the
    defaults (1 and 100) are used instead.
    """
    try:
        reading_date = parse_optional_date(date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid request: query.date: {e}")

    page_size, offset = pagination_window(page, limit)

    if reading_date is None:
        sql = "SELECT * FROM sensor_readings ORDER BY time, id LIMIT %s OFFSET %s"
        params = [page_size, offset]
    else:
        sql = (
            "SELECT * FROM sensor_readings WHERE date = %s "
            "ORDER BY time, id LIMIT %s OFFSET %s"
        )
        params = [reading_date, page_size, offset]

    try:
        return db.fetch_all(sql, params)
    except BACKEND_ERRORS as e:
        logger.error(f"Error retrieving sensor readings: {e}", exc_info=True)
        return server_error("Error retrieving data")


@router.get("/procedure", response_model=list[SensorReading])
def list_readings_by_date(
    date: Date = Query(
        ...,
        description="The date for which sensor readings are requested (format: YYYY-MM-DD). Example: 2017-12-22"
    ),
    db: Database = Depends(get_database),
):
    """
    Retrieve sensor readings for a date using the stored procedure.

    Calls get_sensor_readings_by_date() in the database. No pagination -
    you get everything for that day.
    """
    try:
        return db.fetch_all("SELECT * FROM get_sensor_readings_by_date(%s)", [date])
    except BACKEND_ERRORS as e:
        logger.error(f"Error retrieving sensor readings for {date} via procedure: {e}", exc_info=True)
        return server_error("Error retrieving data")


# =============================================================================
# CREATE / UPDATE / DELETE BY VALUE
# =============================================================================

@router.post("", status_code=201, response_class=PlainTextResponse)
def add_reading(request: CreateReadingRequest, db: Database = Depends(get_database)):
    """
    Add a new sensor reading.

    Send us date, temperature and humidity (and optionally the time of
    day - otherwise the database uses its current time).
    """
    columns = ["date", "temperature", "humidity"]
    params = [request.date, request.temperature, request.humidity]
    if request.time is not None:
        columns.append("time")
        params.append(request.time)

    placeholders = ", ".join(["%s"] * len(columns))
    sql = f"INSERT INTO sensor_readings ({', '.join(columns)}) VALUES ({placeholders})"

    try:
        db.execute(sql, params)
    except BACKEND_ERRORS as e:
        logger.error(f"Error adding sensor reading: {e}", exc_info=True)
        return server_error("Error adding data")

    logger.info(f"Added sensor reading for {request.date}")
    return PlainTextResponse("Sensor reading added successfully", status_code=201)


@router.put("", response_class=PlainTextResponse)
def update_readings(request: UpdateReadingRequest, db: Database = Depends(get_database)):
    """
    Update existing sensor readings by date, temperature, and humidity.

    Every row that has exactly this date/temperature/humidity gets
    new_temperature/new_humidity. Leave those out and the matched values
    are written back as they are.

    Returns success even when nothing matched.
    """
    new_temperature = request.new_temperature
    if new_temperature is None:
        new_temperature = request.temperature
    new_humidity = request.new_humidity
    if new_humidity is None:
        new_humidity = request.humidity

    try:
        updated = db.execute(
            "UPDATE sensor_readings SET temperature = %s, humidity = %s "
            "WHERE date = %s AND temperature = %s AND humidity = %s",
            [new_temperature, new_humidity, request.date, request.temperature, request.humidity]
        )
    except BACKEND_ERRORS as e:
        logger.error(f"Error updating sensor reading: {e}", exc_info=True)
        return server_error("Error updating data")

    logger.info(f"Updated {updated} sensor reading(s) for {request.date}")
    return "Sensor reading updated successfully"


@router.delete("", response_class=PlainTextResponse)
def delete_readings(request: DeleteReadingRequest, db: Database = Depends(get_database)):
    """
    Delete sensor readings by date, temperature, and humidity.

    Removes EVERY row with this exact triple. Returns success even when
    nothing matched.
    """
    try:
        deleted = db.execute(
            "DELETE FROM sensor_readings WHERE date = %s AND temperature = %s AND humidity = %s",
            [request.date, request.temperature, request.humidity]
        )
    except BACKEND_ERRORS as e:
        logger.error(f"Error deleting sensor reading: {e}", exc_info=True)
        return server_error("Error deleting data")

    logger.info(f"Deleted {deleted} sensor reading(s) for {request.date}")
    return "Sensor reading deleted successfully"


# =============================================================================
# SINGLE READING BY ID
# =============================================================================

@router.get("/{reading_id}", response_model=SensorReading, responses={404: {"description": NOT_FOUND}})
def get_reading(reading_id: int, db: Database = Depends(get_database)):
    """Get one reading by its id."""
    try:
        row = db.fetch_one("SELECT * FROM sensor_readings WHERE id = %s", [reading_id])
    except BACKEND_ERRORS as e:
        logger.error(f"Error retrieving sensor reading {reading_id}: {e}", exc_info=True)
        return server_error("Error retrieving data")

    if row is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return row


@router.put("/{reading_id}", response_model=SensorReading, responses={404: {"description": NOT_FOUND}})
def update_reading(
    reading_id: int,
    request: UpdateReadingByIdRequest,
    db: Database = Depends(get_database),
):
    """Set the temperature and humidity of one reading."""
    try:
        row = db.fetch_one(
            "UPDATE sensor_readings SET temperature = %s, humidity = %s WHERE id = %s RETURNING *",
            [request.temperature, request.humidity, reading_id]
        )
    except BACKEND_ERRORS as e:
        logger.error(f"Error updating sensor reading {reading_id}: {e}", exc_info=True)
        return server_error("Error updating data")

    if row is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return row


@router.delete("/{reading_id}", response_class=PlainTextResponse, responses={404: {"description": NOT_FOUND}})
def delete_reading(reading_id: int, db: Database = Depends(get_database)):
    """Delete one reading by its id."""
    try:
        deleted = db.execute("DELETE FROM sensor_readings WHERE id = %s", [reading_id])
    except BACKEND_ERRORS as e:
        logger.error(f"Error deleting sensor reading {reading_id}: {e}", exc_info=True)
        return server_error("Error deleting data")

    if deleted == 0:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return "Sensor reading deleted successfully"
