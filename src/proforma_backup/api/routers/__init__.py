"""
proforma_backup.api.routers

HTTP routers, one module per resource.
"""
