"""core/ -- Kernel shared by every layer: settings, error taxonomy, database engine.

Layer rule: core/ imports only stdlib and third-party libraries.
"""
