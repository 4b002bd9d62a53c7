"""Persistence layer: database engine, ORM models, repositories and stores."""
