"""Infrastructure Layer — database sessions, security primitives, logging setup.

Invariants:
    - Infrastructure may raise core errors but never calls services
    - All database errors mapped to DatabaseError before leaving this layer

Design Decisions:
    - Thin wrappers over third-party libraries (SQLAlchemy, passlib, python-jose)
"""
