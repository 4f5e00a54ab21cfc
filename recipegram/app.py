import logging
from typing import Dict, Any, Optional

from .config import DB_FILE, MEDIA_DIR
from .db.connection import Database
from .db.schema import initialize_database
from .utils.media import MediaStore
from .api.auth import AuthService
from .api.recipe import RecipeRepository
from .api.credentials import CredentialPolicy

logger = logging.getLogger(__name__)


class RecipegramApp:
    """
    Wires the storage, media and services together.

    Construct once per process. start() creates the schema; a schema failure
    is logged and kept in startup_state instead of aborting, so surfaces can
    report it.
    """

    def __init__(self,
                 db_file: str = DB_FILE,
                 media_dir: str = MEDIA_DIR,
                 credentials: Optional[CredentialPolicy] = None):
        self.db = Database(db_file)
        self.media = MediaStore(media_dir)
        self.auth = AuthService(self.db, self.media, credentials)
        self.recipes = RecipeRepository(self.db, self.media)
        self.startup_state: Dict[str, Any] = {"ready": False, "error": "Database not initialized"}

    def start(self) -> Dict[str, Any]:
        result = initialize_database(self.db)
        if result.get("success"):
            self.startup_state = {"ready": True, "error": None}
        else:
            logger.error(f"Startup continues without a usable schema: {result.get('error')}")
            self.startup_state = {"ready": False, "error": result.get("error")}
        return result

    def status(self) -> Dict[str, Any]:
        return {
            "ready": self.startup_state["ready"],
            "error": self.startup_state["error"],
            "db_file": self.db.db_file,
            "media_dir": str(self.media.media_dir)
        }

    def close(self) -> None:
        self.db.close()
