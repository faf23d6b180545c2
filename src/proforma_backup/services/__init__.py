"""
proforma_backup.services

Service-layer package.

Responsibilities:
- Own transaction boundaries for backups (reconciliation).
- Assemble read-side views (projection).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services take an AsyncSession and are testable against a throwaway SQLite database.
