import json

import pytest

from recipegram.cli import RecipegramCLI
from tests.helpers import publish_soup


@pytest.fixture
def cli(app):
    return RecipegramCLI(app)


def test_db_init(cli, capsys):
    assert cli.run(["db", "init"]) == 0
    assert "Database initialized successfully" in capsys.readouterr().out


def test_status(cli, capsys):
    assert cli.run(["status"]) == 0
    assert "Database ready" in capsys.readouterr().out


def test_register_and_login(cli, capsys):
    assert cli.run(["register", "chef1", "--password", "pw1"]) == 0
    assert "Account created for chef1" in capsys.readouterr().out

    assert cli.run(["register", "CHEF1", "--password", "pw1"]) == 1
    assert "User already exists" in capsys.readouterr().out

    assert cli.run(["login", "Chef1", "--password", "pw1"]) == 0
    assert "Logged in as chef1" in capsys.readouterr().out

    assert cli.run(["login", "chef1", "--password", "nope"]) == 1
    assert "Invalid credentials" in capsys.readouterr().out


def test_register_empty_password_is_validation_error(cli, capsys):
    assert cli.run(["register", "chef1", "--password", ""]) == 2
    assert "password" in capsys.readouterr().out


def test_publish_from_json_file(cli, app, chef, tmp_path, capsys):
    recipe_file = tmp_path / "soup.json"
    recipe_file.write_text(json.dumps({
        "name": "Soup",
        "time": "20 min",
        "ingredients": [{"name": "Water", "amount": "1L"}, {"name": "", "amount": ""}],
        "steps": [{"name": "Heat", "description": "Boil it"}],
    }), encoding="utf-8")

    assert cli.run(["publish", str(recipe_file), "--author-id", str(chef)]) == 0
    assert "Recipe published successfully" in capsys.readouterr().out

    recipes = app.recipes.list_by_author(chef)
    assert len(recipes) == 1
    assert recipes[0]["ingredients_count"] == 1


def test_publish_invalid_file(cli, chef, tmp_path, capsys):
    recipe_file = tmp_path / "bad.json"
    recipe_file.write_text(json.dumps({"name": "Soup", "time": "", "ingredients": [], "steps": []}))

    assert cli.run(["publish", str(recipe_file), "--author-id", str(chef)]) == 2
    out = capsys.readouterr().out
    assert "Time is missing" in out


@pytest.mark.parametrize("payload", [[{"name": "Soup"}], "Soup", 42, None])
def test_publish_file_without_object(cli, app, chef, tmp_path, capsys, payload):
    recipe_file = tmp_path / "list.json"
    recipe_file.write_text(json.dumps(payload))

    assert cli.run(["publish", str(recipe_file), "--author-id", str(chef)]) == 2
    assert "must contain a JSON object" in capsys.readouterr().out
    assert app.recipes.list_by_author(chef) == []


def test_publish_unreadable_file(cli, tmp_path, capsys):
    assert cli.run(["publish", str(tmp_path / "missing.json"), "--author-id", "1"]) == 2
    assert "Could not read" in capsys.readouterr().out


def test_feed_show_and_delete(cli, app, chef, capsys):
    assert cli.run(["feed"]) == 0
    assert "No recipes published yet" in capsys.readouterr().out

    recipe_id = publish_soup(app, chef)["recipe_id"]

    assert cli.run(["feed"]) == 0
    out = capsys.readouterr().out
    assert "Soup" in out and "1 ingredients" in out and "1 steps" in out

    assert cli.run(["show", str(recipe_id)]) == 0
    out = capsys.readouterr().out
    assert "Water: 1L" in out and "1." in out and "Boil it" in out

    assert cli.run(["show", str(recipe_id), "--json"]) == 0
    assert json.loads(capsys.readouterr().out)["id"] == recipe_id

    assert cli.run(["delete", str(recipe_id)]) == 0
    capsys.readouterr()
    assert cli.run(["show", str(recipe_id)]) == 1
    assert "Recipe not found" in capsys.readouterr().out


def test_profile_and_my_recipes(cli, app, chef, capsys):
    publish_soup(app, chef)

    assert cli.run(["profile", str(chef)]) == 0
    out = capsys.readouterr().out
    assert "chef1" in out and "My Recipes (1)" in out

    assert cli.run(["my-recipes", str(chef)]) == 0
    assert "Soup" in capsys.readouterr().out

    assert cli.run(["profile", "999"]) == 1
    assert "User not found" in capsys.readouterr().out


def test_no_command_prints_help(cli, capsys):
    assert cli.run([]) == 0
    assert "usage" in capsys.readouterr().out.lower()
