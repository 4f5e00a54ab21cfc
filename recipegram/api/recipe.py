import sqlite3
import logging
from typing import List, Dict, Any, Optional

from ..db.connection import Database
from ..utils.media import MediaStore
from ..models.db_models import ErrorCode, error_result
from ..models.recipe import NewRecipe, NewIngredient, NewStep

logger = logging.getLogger(__name__)

# Feed projection: recipe columns plus author name and child counts
SUMMARY_QUERY = """
    SELECT
        recipes.*,
        users.username AS author_name,
        (SELECT COUNT(*) FROM ingredients WHERE ingredients.recipe_id = recipes.id) AS ingredients_count,
        (SELECT COUNT(*) FROM steps WHERE steps.recipe_id = recipes.id) AS steps_count
    FROM recipes
    JOIN users ON recipes.author_id = users.id
    {where}
    ORDER BY recipes.created_at DESC, recipes.id DESC
"""


class RecipeRepository:
    """
    Reads, publishes and deletes recipes.

    Recipe summaries and details come back as plain dicts built from the
    query rows.
    """

    def __init__(self, db: Database, media: MediaStore):
        self.db = db
        self.media = media

    def list_all(self) -> List[Dict[str, Any]]:
        """
        All recipes for the feed, newest first.

        Each summary holds the recipe columns plus author_name,
        ingredients_count and steps_count. An empty feed is an empty list;
        storage errors are logged and also give an empty list.
        """
        try:
            return self.db.fetch_all(SUMMARY_QUERY.format(where=""))
        except sqlite3.Error as e:
            logger.error(f"Error getting recipes: {e}")
            return []

    def list_by_author(self, user_id: int) -> List[Dict[str, Any]]:
        """Recipes published by one user, newest first, in the same shape as list_all()."""
        try:
            return self.db.fetch_all(
                SUMMARY_QUERY.format(where="WHERE recipes.author_id = ?"),
                (user_id,)
            )
        except sqlite3.Error as e:
            logger.error(f"Error fetching recipes of user {user_id}: {e}")
            return []

    def get_detail(self, recipe_id: int) -> Dict[str, Any]:
        """
        Full recipe for the detail view.

        Ingredients come in the order they were entered. Steps come ordered by
        step_order, each with step_image set to its photo path or None.

        Returns:
            Dict with success=True and the recipe (including author_name,
            ingredients and steps), or success=False with NOT_FOUND or
            STORAGE_ERROR
        """
        try:
            recipe = self.db.fetch_one("""
                SELECT recipes.*, users.username AS author_name
                FROM recipes JOIN users ON recipes.author_id = users.id
                WHERE recipes.id = ?
            """, (recipe_id,))

            if recipe is None:
                return error_result("Recipe not found", ErrorCode.NOT_FOUND)

            recipe["ingredients"] = self.db.fetch_all(
                "SELECT * FROM ingredients WHERE recipe_id = ? ORDER BY id ASC",
                (recipe_id,)
            )

            # Only the first photo of a step is shown
            recipe["steps"] = self.db.fetch_all("""
                SELECT steps.*, step_photos.image_path AS step_image
                FROM steps
                LEFT JOIN step_photos ON step_photos.id = (
                    SELECT MIN(id) FROM step_photos WHERE step_photos.step_id = steps.id
                )
                WHERE steps.recipe_id = ?
                ORDER BY steps.step_order ASC
            """, (recipe_id,))

            return {"success": True, "recipe": recipe}

        except sqlite3.Error as e:
            logger.error(f"Error loading recipe {recipe_id}: {e}")
            return error_result("Could not load recipe", ErrorCode.STORAGE_ERROR)

    def publish(self, recipe: NewRecipe, ingredients: List[NewIngredient], steps: List[NewStep]) -> Dict[str, Any]:
        """
        Store a new recipe together with its ingredients and steps.

        Input is expected to be validated already (see PublishRecipeInput).
        Images are copied into durable storage first; an image that cannot be
        copied is left out. Ingredient rows with a blank name are skipped.
        Steps get step_order 1..N in the order given. All rows are written in
        one transaction, so a failure leaves nothing behind.

        Returns:
            Dict with success=True and the new recipe_id, or success=False
            with STORAGE_ERROR
        """
        main_image = self.media.persist(recipe.image_path)
        step_images: List[Optional[str]] = [self.media.persist(step.image_path) for step in steps]

        try:
            with self.db.transaction() as cursor:
                cursor.execute(
                    "INSERT INTO recipes (name, description, time, author_id, image_path) VALUES (?, ?, ?, ?, ?)",
                    (recipe.name, recipe.description, recipe.time, recipe.author_id, main_image)
                )
                recipe_id = cursor.lastrowid

                for ingredient in ingredients:
                    if ingredient.name.strip():
                        cursor.execute(
                            "INSERT INTO ingredients (recipe_id, name, amount) VALUES (?, ?, ?)",
                            (recipe_id, ingredient.name, ingredient.amount)
                        )

                for order, (step, step_image) in enumerate(zip(steps, step_images), 1):
                    cursor.execute(
                        "INSERT INTO steps (recipe_id, name, description, step_order) VALUES (?, ?, ?, ?)",
                        (recipe_id, step.name, step.description, order)
                    )
                    if step_image:
                        cursor.execute(
                            "INSERT INTO step_photos (step_id, image_path) VALUES (?, ?)",
                            (cursor.lastrowid, step_image)
                        )

            logger.info(f"Published recipe {recipe_id} '{recipe.name}' by user {recipe.author_id}")
            return {"success": True, "recipe_id": recipe_id}

        except sqlite3.Error as e:
            logger.error(f"Error publishing recipe '{recipe.name}': {e}")
            return error_result("Failed to save recipe", ErrorCode.STORAGE_ERROR)

    def delete(self, recipe_id: int) -> bool:
        """
        Delete a recipe; its ingredients, steps and step photos go with it.

        Returns:
            True once the delete statement ran, False on any storage error
        """
        try:
            self.db.execute("DELETE FROM recipes WHERE id = ?", (recipe_id,))
            logger.info(f"Deleted recipe {recipe_id}")
            return True
        except sqlite3.Error as e:
            logger.error(f"Error deleting recipe {recipe_id}: {e}")
            return False
