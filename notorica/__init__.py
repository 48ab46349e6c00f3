"""
Notorica.

- core/: Configuration, logging, exceptions, database, background writers
- models/: SQLAlchemy key-value table
- repositories/: Key-value data access and the note state container
- schemas/: Pydantic records (notes, intents, preferences, documents, dashboard)
- services/: Colors, storage, preferences, dashboard, documents, notebook facade
"""

__version__ = "0.1.0"
