"""
utils/
Package for various utility functions and classes.
- media.py copies picked or downloaded images into durable app storage.
"""
