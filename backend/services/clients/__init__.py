"""Client directory service: paged, searchable CRUD over client records."""

__version__ = "1.0.0"
