"""api/routes/ -- One APIRouter per resource, mounted under /api by api/main.py."""
