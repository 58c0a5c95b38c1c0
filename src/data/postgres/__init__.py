"""Relational database module (PostgreSQL in production)."""

from src.data.postgres.connection import DatabaseConnection, db_connection

__all__ = ["DatabaseConnection", "db_connection"]
