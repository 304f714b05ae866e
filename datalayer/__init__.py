"""
datalayer: generic async repository layer.

Provides session-aware CRUD repositories over SQLAlchemy models, a populate
mini-language for nested eager loading, and a unit of work for sharing one
transaction across repositories.
"""

__version__ = "0.1.0"
