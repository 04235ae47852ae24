"""
Scripts for CareTimeline
Utility scripts for database seeding
"""

from .seed_data import seed_all, create_tables

__all__ = [
    "seed_all",
    "create_tables"
]
