"""Configuration management for the nutriplan client."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
BASE_DIR: Final[Path] = Path(__file__).parent.parent
_env_path = BASE_DIR / '.env'
if _env_path.exists():
    load_dotenv(_env_path)

# Remote meal-plan API
API_BASE_URL: Final[str] = os.getenv('NUTRIPLAN_API_URL', 'http://localhost:5000/api').rstrip('/')
API_TIMEOUT: Final[float] = float(os.getenv('NUTRIPLAN_API_TIMEOUT', '10'))

# Session handed over by the auth collaborator
SESSION_TOKEN: Final[str] = os.getenv('NUTRIPLAN_TOKEN', '')
SESSION_USER_ID: Final[str] = os.getenv('NUTRIPLAN_USER_ID', '')
SESSION_ROLE: Final[str] = os.getenv('NUTRIPLAN_ROLE', 'dietitian')

# Seconds between background plan refreshes; 0 disables the refresher
REFRESH_INTERVAL: Final[float] = float(os.getenv('NUTRIPLAN_REFRESH_INTERVAL', '0'))

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '127.0.0.1')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()
