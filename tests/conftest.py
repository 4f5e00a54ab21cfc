import pytest

from recipegram.app import RecipegramApp
from recipegram.api.credentials import PasslibCredentialPolicy


@pytest.fixture
def media_dir(tmp_path):
    return tmp_path / "media"


@pytest.fixture
def app(tmp_path, media_dir):
    app = RecipegramApp(
        db_file=str(tmp_path / "recipegram.db"),
        media_dir=str(media_dir),
        credentials=PasslibCredentialPolicy()
    )
    app.start()
    yield app
    app.close()


@pytest.fixture
def picture(tmp_path):
    """A file standing in for an image in the picker's temporary cache."""
    cache = tmp_path / "picker-cache"
    cache.mkdir()
    path = cache / "soup.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0 fake jpeg")
    return path


@pytest.fixture
def chef(app):
    result = app.auth.register("chef1", "pw1")
    assert result["success"] is True
    return result["user_id"]
