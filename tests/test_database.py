# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import pytest
from unittest.mock import MagicMock
from sqlalchemy import inspect

from app.db import database
from app.db.database import get_db


def test_get_db_closes_session(mocker):
    """
    Tests that the database session is properly closed by the get_db dependency,
    even if an exception occurs.
    """
    mock_db_session = MagicMock()
    mocker.patch('app.db.database.SessionLocal', return_value=mock_db_session)

    db_generator = get_db()
    db = next(db_generator)
    assert db is mock_db_session

    with pytest.raises(ValueError):
        db_generator.throw(ValueError("Simulated error during dependency usage"))

    mock_db_session.close.assert_called_once()


def test_testing_mode_uses_in_memory_sqlite():
    assert database.SQLALCHEMY_DATABASE_URL == "sqlite:///:memory:"
    assert database.connect_args == {"check_same_thread": False}


def test_schema_has_lifecycle_tables(db_session):
    inspector = inspect(db_session.get_bind())

    assert {"users", "donations", "notifications"} <= set(inspector.get_table_names())
    donation_columns = {column["name"] for column in inspector.get_columns("donations")}
    assert {"status", "donor_id", "ngo_id", "volunteer_id", "acceptance_time", "delivered_time"} <= donation_columns
