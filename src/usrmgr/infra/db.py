# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Engine construction and the ``users`` table definition."""

from __future__ import annotations

from sqlalchemy import Column, Date, Integer, MetaData, String, Table, Text, create_engine
from sqlalchemy.engine import Engine

metadata = MetaData()

users_table = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
    Column("name", String(255), nullable=False),
    Column("category", Integer, nullable=False, server_default="0"),
    Column("dob", Date, nullable=False),
    Column("bio", Text, nullable=False, server_default=""),
    Column("avatar", String(255), nullable=False, server_default=""),
)


def make_engine(database_url: str) -> Engine:
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    """Create the ``users`` table if it does not exist yet."""
    metadata.create_all(bind=engine)
