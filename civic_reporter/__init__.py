"""Civic Issue Reporter API.

A FastAPI application where citizens report municipal issues with:
- Department-scoped issue intake and listing
- Human-readable issue codes from an atomic sequence counter
- SQLAlchemy ORM with async support
- Local media storage and Slack notifications
"""
