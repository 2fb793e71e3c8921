"""
API routes for Ledgerline Finance API.

This package contains all API endpoint definitions organized by feature.
"""

from src.api.routes import (
    accounts,
    auth,
    calendar,
    categories,
    documents,
    health,
    metadata,
    movements,
    reports,
    root,
    tags,
    tasks,
    users,
)

__all__ = [
    "accounts",
    "auth",
    "calendar",
    "categories",
    "documents",
    "health",
    "metadata",
    "movements",
    "reports",
    "root",
    "tags",
    "tasks",
    "users",
]
