"""
Database Operations

Handles the SQLite connection, schema management and MCP tool registration
for Recipegram:
- Persistent storage: users, recipes, ingredients, steps, step photos
"""
