"""
meetbook - discover and book meeting slots against a single calendar.
"""

__version__ = "0.1.0"
