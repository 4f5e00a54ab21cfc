import sqlite3
import logging
from typing import Dict, Any

from .connection import Database
from ..models.db_models import ErrorCode, error_result

logger = logging.getLogger(__name__)

# Table names in creation order (parents before children)
TABLES = ("users", "recipes", "ingredients", "steps", "step_photos")


def initialize_database(db: Database) -> Dict[str, Any]:
    """
    Initialize the Recipegram database with the required tables.

    Creates the users, recipes, ingredients, steps and step_photos tables with
    cascading foreign keys, so that deleting a user removes their recipes and
    deleting a recipe removes its ingredients, steps and step photos. Safe to
    run on every start: existing tables and data are left untouched.

    What this creates:
    - users table with a case-insensitive unique username
    - recipes table keyed to its author
    - ingredients and steps tables keyed to their recipe
    - step_photos table keyed to its step
    - Indexes for the feed ordering and the child lookups

    Args:
        db: Storage access object whose connection receives the schema

    Returns:
        Dict with success confirmation, or success=False with the error if
        the schema could not be created
    """
    try:
        with db.transaction() as cursor:
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL UNIQUE COLLATE NOCASE,
                    password TEXT NOT NULL,
                    profile_image TEXT
                )
            """)

            # created_at keeps milliseconds so recipes published in the same second still sort
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS recipes (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    description TEXT,
                    time TEXT NOT NULL,
                    author_id INTEGER NOT NULL,
                    image_path TEXT,
                    created_at DATETIME DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now')),
                    FOREIGN KEY (author_id) REFERENCES users (id) ON DELETE CASCADE
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS ingredients (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    recipe_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    amount TEXT NOT NULL,
                    FOREIGN KEY (recipe_id) REFERENCES recipes (id) ON DELETE CASCADE
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS steps (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    recipe_id INTEGER NOT NULL,
                    name TEXT,
                    description TEXT NOT NULL,
                    step_order INTEGER NOT NULL,
                    FOREIGN KEY (recipe_id) REFERENCES recipes (id) ON DELETE CASCADE
                )
            """)

            # caption and several photos per step are allowed but nothing writes them yet
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS step_photos (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    step_id INTEGER NOT NULL,
                    image_path TEXT NOT NULL,
                    caption TEXT,
                    FOREIGN KEY (step_id) REFERENCES steps (id) ON DELETE CASCADE
                )
            """)

            cursor.execute("CREATE INDEX IF NOT EXISTS idx_recipes_author_id ON recipes(author_id)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_recipes_created_at ON recipes(created_at)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_ingredients_recipe_id ON ingredients(recipe_id)")
            cursor.execute("CREATE UNIQUE INDEX IF NOT EXISTS idx_steps_recipe_order ON steps(recipe_id, step_order)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_step_photos_step_id ON step_photos(step_id)")

        logger.info(f"Database schema ready in {db.db_file}")
        return {"success": True, "message": "Database initialized successfully - users, recipes, ingredients, steps and step photos tables ready"}

    except sqlite3.Error as e:
        logger.error(f"SQLite error initializing database: {e}")
        return error_result(f"SQLite error initializing database: {e}", ErrorCode.STORAGE_ERROR)


def list_tables(db: Database) -> Dict[str, Any]:
    """Report which of the application tables exist in the database."""
    try:
        rows = db.fetch_all("SELECT name FROM sqlite_master WHERE type = 'table'")
        existing = {row["name"] for row in rows}
        return {
            "success": True,
            "tables": {table: table in existing for table in TABLES}
        }
    except sqlite3.Error as e:
        logger.error(f"SQLite error listing tables: {e}")
        return error_result(f"SQLite error listing tables: {e}", ErrorCode.STORAGE_ERROR)
