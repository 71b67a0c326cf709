"""Marketplace FastAPI application.

Commands are processed synchronously per request; domain events fan out to
notifications in the same request, right after each unit of work commits.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from marketplace.api.application import build_app
from marketplace.domain import marketplace
from marketplace.utils.db import setup_db

# Initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the configuration overlay (memory by default,
# PostgreSQL under "production").
marketplace.init()
setup_db(marketplace)

app = build_app(marketplace)
