import argparse
import getpass
import json
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .app import RecipegramApp
from .server import configure_logging, create_server
from .models.db_models import RegisterInput, LoginInput, PublishRecipeInput


def _validation_message(error: ValidationError) -> str:
    """Flatten pydantic errors into one line for the terminal."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        message = item.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


class RecipegramCLI:
    def __init__(self, app: Optional[RecipegramApp] = None):
        self.app = app or RecipegramApp()

    # Database management methods
    def initialize_db(self) -> int:
        """Initialize the recipe database."""
        result = self.app.start()
        if result.get("success"):
            print(f"✅ {result['message']}")
            return 0
        print(f"❌ {result['error']}")
        return 1

    def show_status(self) -> int:
        status = self.app.status()
        if status["ready"]:
            print(f"✅ Database ready: {status['db_file']}")
        else:
            print(f"❌ Database not ready: {status['error']}")
        print(f"   Media directory: {status['media_dir']}")
        return 0 if status["ready"] else 1

    # Account methods
    def register(self, username: str, password: str, image_path: Optional[str] = None) -> int:
        """Create a user account."""
        try:
            register_input = RegisterInput(username=username, password=password, image_path=image_path)
        except ValidationError as e:
            print(f"❌ {_validation_message(e)}")
            return 2

        result = self.app.auth.register(register_input.username, register_input.password, register_input.image_path)
        if result.get("success"):
            print(f"✅ Account created for {username} (user id {result['user_id']})")
            return 0
        print(f"❌ {result['error']}")
        return 1

    def login(self, username: str, password: str) -> int:
        try:
            login_input = LoginInput(username=username, password=password)
        except ValidationError as e:
            print(f"❌ {_validation_message(e)}")
            return 2

        result = self.app.auth.login(login_input.username, login_input.password)
        if result.get("success"):
            user = result["user"]
            print(f"✅ Logged in as {user['username']} (user id {user['id']})")
            return 0
        print(f"❌ {result['error']}")
        return 1

    def show_profile(self, user_id: int) -> int:
        result = self.app.auth.get_user(user_id)
        if not result.get("success"):
            print(f"❌ {result['error']}")
            return 1

        user = result["user"]
        recipes = self.app.recipes.list_by_author(user_id)
        print(f"👤 {user['username']} (user id {user['id']})")
        if user.get("profile_image"):
            print(f"   Picture: {user['profile_image']}")
        print(f"   My Recipes ({len(recipes)})")
        self._print_summaries(recipes)
        return 0

    # Recipe methods
    def feed(self) -> int:
        """Print every recipe, newest first."""
        recipes = self.app.recipes.list_all()
        if not recipes:
            print("ℹ️ No recipes published yet")
            return 0
        self._print_summaries(recipes)
        return 0

    def my_recipes(self, user_id: int) -> int:
        recipes = self.app.recipes.list_by_author(user_id)
        if not recipes:
            print(f"ℹ️ User {user_id} has not published any recipes")
            return 0
        self._print_summaries(recipes)
        return 0

    def show_recipe(self, recipe_id: int, as_json: bool = False) -> int:
        """Print a recipe with its ingredients and steps."""
        result = self.app.recipes.get_detail(recipe_id)
        if not result.get("success"):
            print(f"❌ {result['error']}")
            return 1

        recipe = result["recipe"]
        if as_json:
            print(json.dumps(recipe, indent=2, ensure_ascii=False))
            return 0

        print(f"🍽️ {recipe['name']}")
        print(f"   ⏱ {recipe['time']}   👤 {recipe['author_name']}")
        if recipe.get("description"):
            print(f"\n{recipe['description']}")

        print("\nIngredients")
        for ingredient in recipe["ingredients"]:
            print(f"  - {ingredient['name']}: {ingredient['amount']}")

        print("\nSteps")
        for step in recipe["steps"]:
            headline = f" {step['name']}" if step.get("name") else ""
            print(f"  {step['step_order']}.{headline}")
            print(f"     {step['description']}")
            if step.get("step_image"):
                print(f"     🖼 {step['step_image']}")
        return 0

    def publish(self, recipe_file: str, author_id: Optional[int] = None) -> int:
        """Publish a recipe described in a JSON file."""
        try:
            with open(recipe_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"❌ Could not read {recipe_file}: {e}")
            return 2

        if not isinstance(data, dict):
            print(f"❌ {recipe_file} must contain a JSON object")
            return 2

        if author_id is not None:
            data["author_id"] = author_id

        try:
            publish_input = PublishRecipeInput.model_validate(data)
        except ValidationError as e:
            print(f"❌ {_validation_message(e)}")
            return 2

        recipe, ingredients, steps = publish_input.to_records()
        result = self.app.recipes.publish(recipe, ingredients, steps)
        if result.get("success"):
            print(f"✅ Recipe published successfully! (recipe id {result['recipe_id']})")
            return 0
        print(f"❌ {result['error']}")
        return 1

    def delete(self, recipe_id: int) -> int:
        if self.app.recipes.delete(recipe_id):
            print(f"✅ Recipe {recipe_id} deleted")
            return 0
        print("❌ Could not delete recipe")
        return 1

    def serve(self) -> int:
        """Run the MCP server over stdio."""
        create_server(self.app).run()
        return 0

    def _print_summaries(self, recipes: List[Dict[str, Any]]) -> None:
        for recipe in recipes:
            print(f"  🍽️ [{recipe['id']}] {recipe['name']} - {recipe['time']}")
            print(f"     by {recipe['author_name']} · {recipe['ingredients_count']} ingredients · "
                  f"{recipe['steps_count']} steps · {recipe['created_at']}")

    def create_parser(self):
        """Create the argument parser."""
        parser = argparse.ArgumentParser(description='Share and browse recipes stored in a local database')
        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        # Database commands
        db_parser = subparsers.add_parser('db', help='Database management commands')
        db_subparsers = db_parser.add_subparsers(dest='db_command', help='Database operations')
        db_subparsers.add_parser('init', help='Initialize the database')

        subparsers.add_parser('status', help='Show whether the database is ready')

        # Account commands
        register_parser = subparsers.add_parser('register', help='Create an account')
        register_parser.add_argument('username', help='Login name')
        register_parser.add_argument('--password', help='Password (prompted for when omitted)')
        register_parser.add_argument('--image', help='Profile picture to copy into app storage')

        login_parser = subparsers.add_parser('login', help='Check a username and password')
        login_parser.add_argument('username', help='Login name')
        login_parser.add_argument('--password', help='Password (prompted for when omitted)')

        profile_parser = subparsers.add_parser('profile', help="Show a user's profile and recipes")
        profile_parser.add_argument('user_id', type=int, help='User ID')

        # Recipe commands
        subparsers.add_parser('feed', help='List all recipes, newest first')

        my_recipes_parser = subparsers.add_parser('my-recipes', help='List recipes published by a user')
        my_recipes_parser.add_argument('user_id', type=int, help='User ID')

        show_parser = subparsers.add_parser('show', help='Show a recipe with ingredients and steps')
        show_parser.add_argument('recipe_id', type=int, help='Recipe ID')
        show_parser.add_argument('--json', action='store_true', help='Print the recipe as JSON')

        publish_parser = subparsers.add_parser('publish', help='Publish a recipe from a JSON file')
        publish_parser.add_argument('recipe_file', help='JSON file with name, time, ingredients and steps')
        publish_parser.add_argument('--author-id', dest='author_id', type=int,
                                    help='Publishing user ID (overrides author_id in the file)')

        delete_parser = subparsers.add_parser('delete', help='Delete a recipe')
        delete_parser.add_argument('recipe_id', type=int, help='Recipe ID')

        subparsers.add_parser('serve', help='Run the MCP server over stdio')

        return parser

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the CLI application."""
        parser = self.create_parser()
        args = parser.parse_args(argv)

        if args.command is None:
            parser.print_help()
            return 0

        try:
            # Every command needs the schema; init reports on it explicitly
            if args.command == 'db':
                if args.db_command == 'init':
                    return self.initialize_db()
                parser.print_help()
                return 0
            self.app.start()

            if args.command == 'status':
                return self.show_status()
            elif args.command == 'register':
                password = args.password if args.password is not None else getpass.getpass('Password: ')
                return self.register(args.username, password, args.image)
            elif args.command == 'login':
                password = args.password if args.password is not None else getpass.getpass('Password: ')
                return self.login(args.username, password)
            elif args.command == 'profile':
                return self.show_profile(args.user_id)
            elif args.command == 'feed':
                return self.feed()
            elif args.command == 'my-recipes':
                return self.my_recipes(args.user_id)
            elif args.command == 'show':
                return self.show_recipe(args.recipe_id, args.json)
            elif args.command == 'publish':
                return self.publish(args.recipe_file, args.author_id)
            elif args.command == 'delete':
                return self.delete(args.recipe_id)
            elif args.command == 'serve':
                return self.serve()
        finally:
            self.app.close()

        parser.print_help()
        return 0


def main():
    """Main entry point"""
    configure_logging()
    cli = RecipegramCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
