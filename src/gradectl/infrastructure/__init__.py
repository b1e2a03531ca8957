"""Infrastructure layer — repositories, SQLite engine, and the grade store.

This layer depends on stdlib, third-party libs (SQLAlchemy), and the
domain models it persists. It must never import from services, commands,
or output.
"""
