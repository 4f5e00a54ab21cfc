"""
Configuration parameters for Recipegram
"""

import os

# Database configuration - use absolute path to ensure proper location
_script_dir = os.path.dirname(os.path.abspath(__file__))
_project_root = os.path.dirname(_script_dir)
_default_db_path = os.path.join(_project_root, "recipegram.db")
_default_media_dir = os.path.join(_project_root, "media")

DB_FILE = os.environ.get("RECIPEGRAM_DB_FILE", _default_db_path)

# Durable storage for copied recipe, step and profile images
MEDIA_DIR = os.environ.get("RECIPEGRAM_MEDIA_DIR", _default_media_dir)
DEFAULT_IMAGE_NAME = "img.jpg"
MEDIA_DOWNLOAD_TIMEOUT = int(os.environ.get("MEDIA_DOWNLOAD_TIMEOUT", "15"))

# Credential policy: "pbkdf2_sha256" (hashed) or "plaintext" (legacy databases)
PASSWORD_SCHEME = os.environ.get("RECIPEGRAM_PASSWORD_SCHEME", "pbkdf2_sha256")

# Logging
LOG_LEVEL = os.environ.get("RECIPEGRAM_LOG_LEVEL", "WARNING")
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
