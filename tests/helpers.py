from recipegram.models.recipe import NewRecipe, NewIngredient, NewStep


def make_recipe(author_id, name="Soup", time="20 min", **kwargs):
    return NewRecipe(name=name, time=time, author_id=author_id, **kwargs)


def publish_soup(app, author_id, name="Soup"):
    return app.recipes.publish(
        make_recipe(author_id, name=name),
        [NewIngredient(name="Water", amount="1L")],
        [NewStep(description="Boil it")]
    )


def count_rows(app, table, where="", params=()):
    sql = f"SELECT COUNT(*) AS n FROM {table} {where}"
    return app.db.fetch_one(sql, params)["n"]
