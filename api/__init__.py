"""api/ -- HTTP layer for notekeeper (FastAPI app, routes, transport models).

Layer rule: api/ may import from auth/, notes/, and core/. Nothing imports
from api/ except main.py, which borrows the validation constants.
"""
