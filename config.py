import os
import platform
from dotenv import load_dotenv

# Load environment variables from .env file(s)
# 1) Project root .env
load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))

data_dir = os.environ.get('FASTCOMMAND_DATA_DIR') or os.path.join(basedir, 'data')

# 2) Overlay data/.env so settings saved at runtime persist via the mounted volume
data_env_path = os.path.join(data_dir, '.env')
if os.path.exists(data_env_path):
    load_dotenv(dotenv_path=data_env_path, override=True)


def _env_flag(name, default='false'):
    return os.environ.get(name, default).lower() in ['true', 'on', '1', 'yes']


def ensure_data_directory(path):
    """Ensure the data directory exists with proper permissions (cross-platform)"""
    os.makedirs(path, exist_ok=True)
    if platform.system() != "Windows":
        try:
            os.chmod(path, 0o755)
        except (OSError, PermissionError):
            # Ignore permission errors (common on mounted volumes)
            pass
    return path


class Config:
    # Where the published settings, version history and audit log JSON files live
    DATA_DIR = data_dir

    # Logging level for the root and app loggers
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # Rollback re-publishes content that passed validation once; set to re-check it
    # against the current rules before it goes live again.
    SETTINGS_VALIDATE_ON_ROLLBACK = _env_flag('SETTINGS_VALIDATE_ON_ROLLBACK')

    # Commission percent used when neither a policy nor the settings document provides one
    DEFAULT_COMMISSION_PERCENT = float(os.environ.get('DEFAULT_COMMISSION_PERCENT', 5))

    # Settings documents are small; cap request bodies
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 5 * 1024 * 1024))

    # Application settings
    SITE_NAME = os.environ.get('SITE_NAME', 'Fast Command')
