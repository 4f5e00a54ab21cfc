#!/usr/bin/env python3
"""
Recipegram

Register, log in, publish and browse recipes stored in a local SQLite database.
"""

from recipegram.cli import main

if __name__ == "__main__":
    main()
