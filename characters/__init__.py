"""characters/ -- The character resource: domain dataclass and in-memory store.

Layer rule: characters/ imports only stdlib and core/. api/ imports from
characters/, not the other way around.
"""
