"""
api/
Services exposed to the outer surfaces (CLI and MCP server).
- auth.py registers and authenticates users.
- recipe.py reads, publishes and deletes recipes.
- credentials.py hashes and verifies passwords.
"""
