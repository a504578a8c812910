"""
Database Compatibility Utilities

SQLite/PostgreSQL compatibility for JSON types
"""

from sqlalchemy import JSON
from sqlalchemy.dialects import postgresql


# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONB = JSON().with_variant(postgresql.JSONB(), "postgresql")
