"""
Backend package for the Pastel Planner journal.

This package provides a FastAPI application with a storage abstraction
(in-memory for development and tests, SQLAlchemy for a real database)
behind the school, what-I-did and special entry endpoints.
"""
