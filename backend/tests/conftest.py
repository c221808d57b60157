import re
from datetime import date, time

import psycopg2
import pytest
from fastapi.testclient import TestClient

from sensor_api.main import app
from sensor_api.routers import get_database


class FakeDatabase:
    """
    In-memory stand-in for sensor_api.database.Database.

    Understands exactly the statements the readings router sends.
    """

    def __init__(self):
        self.rows: list[dict] = []
        self.calls: list[tuple[str, list]] = []
        self._next_id = 1
        self.is_connected = True

    # -- helpers for tests ---------------------------------------------------

    def add(self, reading_date, temperature, humidity, at=time(12, 0)):
        row = {
            "id": self._next_id,
            "date": reading_date,
            "time": at,
            "temperature": temperature,
            "humidity": humidity,
        }
        self._next_id += 1
        self.rows.append(row)
        return row

    def _matches(self, row, reading_date, temperature, humidity):
        return (
            row["date"] == reading_date
            and row["temperature"] == temperature
            and row["humidity"] == humidity
        )

    def _ordered(self, rows):
        return sorted(rows, key=lambda r: (r["time"], r["id"]))

    # -- Database contract ---------------------------------------------------

    def connect(self):
        self.is_connected = True

    def close(self):
        self.is_connected = False

    def fetch_all(self, sql, params=()):
        params = list(params)
        self.calls.append((sql, params))

        if sql.startswith("SELECT * FROM get_sensor_readings_by_date"):
            return self._ordered([dict(r) for r in self.rows if r["date"] == params[0]])

        if sql.startswith("SELECT * FROM sensor_readings WHERE date = %s"):
            reading_date, limit, offset = params
            rows = [r for r in self.rows if r["date"] == reading_date]
        elif sql.startswith("SELECT * FROM sensor_readings ORDER BY"):
            limit, offset = params
            rows = self.rows
        else:
            raise AssertionError(f"unexpected statement: {sql}")

        return [dict(r) for r in self._ordered(rows)[offset:offset + limit]]

    def fetch_one(self, sql, params=()):
        params = list(params)
        self.calls.append((sql, params))

        if sql == "SELECT NOW() AS now":
            return {"now": date(2024, 1, 1)}

        if sql.startswith("SELECT * FROM sensor_readings WHERE id = %s"):
            row = next((r for r in self.rows if r["id"] == params[0]), None)
            return dict(row) if row else None

        if sql.startswith("UPDATE sensor_readings") and "WHERE id = %s" in sql:
            temperature, humidity, reading_id = params
            row = next((r for r in self.rows if r["id"] == reading_id), None)
            if row is None:
                return None
            row["temperature"] = temperature
            row["humidity"] = humidity
            return dict(row)

        raise AssertionError(f"unexpected statement: {sql}")

    def execute(self, sql, params=()):
        params = list(params)
        self.calls.append((sql, params))

        if sql.startswith("INSERT INTO sensor_readings"):
            columns = re.search(r"\(([^)]*)\) VALUES", sql).group(1).split(", ")
            values = dict(zip(columns, params))
            self.add(
                values["date"],
                values["temperature"],
                values["humidity"],
                at=values.get("time", time(12, 0)),
            )
            return 1

        if sql.startswith("UPDATE sensor_readings"):
            new_temperature, new_humidity, reading_date, temperature, humidity = params
            matched = [r for r in self.rows if self._matches(r, reading_date, temperature, humidity)]
            for row in matched:
                row["temperature"] = new_temperature
                row["humidity"] = new_humidity
            return len(matched)

        if sql.startswith("DELETE FROM sensor_readings WHERE id = %s"):
            before = len(self.rows)
            self.rows = [r for r in self.rows if r["id"] != params[0]]
            return before - len(self.rows)

        if sql.startswith("DELETE FROM sensor_readings WHERE date = %s"):
            before = len(self.rows)
            self.rows = [r for r in self.rows if not self._matches(r, *params)]
            return before - len(self.rows)

        raise AssertionError(f"unexpected statement: {sql}")

    def check_connection(self):
        return self.fetch_one("SELECT NOW() AS now")


class FailingDatabase:
    """Every call fails the way a dead PostgreSQL server would."""

    is_connected = True

    def _fail(self, *args, **kwargs):
        raise psycopg2.OperationalError("connection refused")

    fetch_all = _fail
    fetch_one = _fail
    execute = _fail
    check_connection = _fail


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def client(fake_db):
    app.dependency_overrides[get_database] = lambda: fake_db
    app.state.db = fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.db = None


@pytest.fixture
def failing_client():
    failing = FailingDatabase()
    app.dependency_overrides[get_database] = lambda: failing
    app.state.db = failing
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.db = None
