"""
Recipegram

Local recipe sharing: user accounts, a recipe feed, multi-step recipes with
illustrated steps, all stored in a single SQLite file.
"""

__version__ = "0.1.0"
