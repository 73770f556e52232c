"""
School Portal API

Public school information site and PPDB (student admission) back-office.
"""

__version__ = "0.1.0"
