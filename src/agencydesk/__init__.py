"""agency-desk — backend functions for the agency client dashboard.

Packages:
    core   — errors, logging, settings, table models
    store  — hosted-database clients (REST, SQLite)
    ops    — transport-agnostic operations returning ``OperationResult``
    llm    — completion gateway client and test double
    api    — FastAPI application exposing the functions over HTTP
    cli    — Typer command line
"""

__version__ = "0.2.0"
