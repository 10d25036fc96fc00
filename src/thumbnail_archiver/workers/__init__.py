"""Celery worker entrypoints."""
