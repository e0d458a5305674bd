"""Database Adapters - SQLAlchemy engine and dialect wrappers for the core protocols."""
