"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that every feature uses (DB wiring,
settings, the error taxonomy). Keep feature-specific SQL and business logic
in the corresponding feature package (e.g. `listings/`).
"""
