"""Połączenie z bazą PostgreSQL — konfiguracja przez zmienne środowiskowe."""

from __future__ import annotations

import os
import pathlib

import psycopg2
from dotenv import load_dotenv

from catalog import Catalogs, PostgresOptionStore

load_dotenv(pathlib.Path(__file__).resolve().parent.parent / ".env")


def get_connection() -> psycopg2.extensions.connection:
    return psycopg2.connect(
        host     = os.getenv("PGHOST",     "localhost"),
        port     = int(os.getenv("PGPORT", "5433")),
        dbname   = os.getenv("PGDATABASE", "script_audit"),
        user     = os.getenv("PGUSER",     "script_audit"),
        password = os.getenv("PGPASSWORD", "script_audit"),
    )


def open_catalogs(conn: psycopg2.extensions.connection) -> Catalogs:
    """Katalogi skryptów w tabeli option."""
    return Catalogs(PostgresOptionStore(conn))
