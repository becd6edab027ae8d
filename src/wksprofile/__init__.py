# src/wksprofile/__init__.py
"""Profile management for cluster-definition repositories."""

__version__ = "0.1.0"
