from typing import Dict, Any
from fastmcp import FastMCP

from .schema import list_tables
from ..app import RecipegramApp
from ..models.db_models import RegisterInput, LoginInput, PublishRecipeInput, ErrorCode, error_result


def register_db_tools(mcp: FastMCP, app: RecipegramApp):
    """Register account and recipe tools with the MCP server."""

    @mcp.tool()
    def initialize_database() -> Dict[str, Any]:
        """
        Initialize the Recipegram database with the required tables.

        Creates the users, recipes, ingredients, steps and step_photos tables if they
        do not exist yet. Existing data is never touched, so this is safe to call at
        any time. The server already runs it once at startup.

        Use this tool when:
        - get_app_status reports the database is not ready
        - The database file was deleted or replaced while the server was running

        Returns:
            Dict with success flag, confirmation message and the table checklist,
            or error details if the schema could not be created
        """
        result = app.start()
        if result.get("success"):
            result["tables"] = list_tables(app.db).get("tables", {})
        return result

    @mcp.tool()
    def get_app_status() -> Dict[str, Any]:
        """
        Report whether the recipe database is ready.

        Returns:
            Dict with ready flag, startup error (if any), database file and media directory
        """
        return app.status()

    @mcp.tool()
    def register_user(register_input: RegisterInput) -> Dict[str, Any]:
        """
        Create a new Recipegram account.

        Usernames are unique regardless of letter case ("Chef" and "chef" are the same
        user). An optional profile picture path is copied into the app's media storage;
        if the copy fails the account is still created, just without a picture.

        Args:
            register_input: username and password (both required) and optional image_path

        Returns:
            Dict with success=True and user_id, or success=False with error and
            error_code (USER_ALREADY_EXISTS, VALIDATION_ERROR, STORAGE_ERROR)
        """
        return app.auth.register(
            register_input.username,
            register_input.password,
            register_input.image_path
        )

    @mcp.tool()
    def login_user(login_input: LoginInput) -> Dict[str, Any]:
        """
        Log in with username and password.

        Returns:
            Dict with success=True and the user (id, username, profile_image), or
            success=False with error "Invalid credentials"
        """
        return app.auth.login(login_input.username, login_input.password)

    @mcp.tool()
    def get_user_profile(user_id: int) -> Dict[str, Any]:
        """
        Get a user's profile together with the recipes they published.

        Args:
            user_id: ID returned by register_user or login_user

        Returns:
            Dict with success=True, the user record and a 'recipes' list (newest first),
            or success=False with NOT_FOUND
        """
        result = app.auth.get_user(user_id)
        if result.get("success"):
            result["recipes"] = app.recipes.list_by_author(user_id)
        return result

    @mcp.tool()
    def list_recipes() -> Dict[str, Any]:
        """
        List every recipe in the feed, newest first.

        Each recipe includes id, name, description, time, image_path, author_id,
        author_name, created_at, ingredients_count and steps_count. Use
        get_recipe_details for ingredients and steps.

        Returns:
            Dict containing 'recipes' array (empty when nothing has been published)
        """
        return {"recipes": app.recipes.list_all()}

    @mcp.tool()
    def list_user_recipes(user_id: int) -> Dict[str, Any]:
        """
        List the recipes published by one user, newest first.

        Args:
            user_id: Author whose recipes to list

        Returns:
            Dict containing 'recipes' array in the same shape as list_recipes
        """
        return {"recipes": app.recipes.list_by_author(user_id)}

    @mcp.tool()
    def get_recipe_details(recipe_id: int) -> Dict[str, Any]:
        """
        Get a full recipe: metadata, author, ingredients and ordered steps.

        Steps are sorted by step_order (1, 2, 3, ...). Each step has a step_image
        field holding the path of its picture, or null when the step has none.

        Args:
            recipe_id: ID from list_recipes or publish_recipe

        Returns:
            Dict with success=True and 'recipe', or success=False with NOT_FOUND
        """
        return app.recipes.get_detail(recipe_id)

    @mcp.tool()
    def publish_recipe(publish_input: PublishRecipeInput) -> Dict[str, Any]:
        """
        Publish a new recipe with its ingredients and steps.

        Requirements checked before anything is stored:
        - name and time are not blank
        - at least one ingredient has a name (rows with a blank name are ignored)
        - at least one step, each with a description

        Main and step pictures are copied into the app's media storage. A picture
        that cannot be copied is skipped; the recipe is still published. The recipe,
        ingredients and steps are stored all together or not at all.

        Args:
            publish_input: author_id, name, time, optional description and image_path,
                           ingredients [{name, amount}] and steps [{name?, description, image_path?}]

        Returns:
            Dict with success=True and recipe_id, or success=False with error details
        """
        recipe, ingredients, steps = publish_input.to_records()
        return app.recipes.publish(recipe, ingredients, steps)

    @mcp.tool()
    def delete_recipe(recipe_id: int) -> Dict[str, Any]:
        """
        Delete a recipe permanently, including its ingredients, steps and step pictures.

        This cannot be undone.

        Args:
            recipe_id: ID of the recipe to delete

        Returns:
            Dict with success flag, or error "Could not delete recipe"
        """
        if app.recipes.delete(recipe_id):
            return {"success": True, "message": f"Recipe {recipe_id} deleted"}
        return error_result("Could not delete recipe", ErrorCode.STORAGE_ERROR)
