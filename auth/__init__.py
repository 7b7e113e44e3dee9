"""auth/ -- Authentication and authorization package for notekeeper.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or notes/.
api/ imports from auth/, not the other way around.
"""
