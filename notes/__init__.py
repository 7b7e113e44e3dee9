"""notes/ -- Note domain model and persistence for notekeeper.

Layer rule: notes/ imports only stdlib, third-party libraries, and core/.
Ownership checks live in auth/ownership.py; notes/ knows nothing about tokens.
"""
