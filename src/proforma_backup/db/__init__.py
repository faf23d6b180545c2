"""
proforma_backup.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, connection lifecycle and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services depend on repositories, never on raw statements, so the backend can be
# swapped (SQLite for dev/test, Postgres in prod) without touching them.
