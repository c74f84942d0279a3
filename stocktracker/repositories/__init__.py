"""Repositories - data access over the ORM models."""
