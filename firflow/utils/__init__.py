# firflow/utils/__init__.py

"""Utility modules for firflow (logging setup)."""
