"""
Simple configuration for the HelloACA contract analysis API.
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_flag(name, default="false"):
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Configuration class for the contract analysis API."""

    # API Configuration
    OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY")

    # Model Settings
    ANALYSIS_MODEL = os.environ.get("ANALYSIS_MODEL", "gpt-4o-mini")
    CHAT_MODEL = os.environ.get("CHAT_MODEL", "gpt-4o-mini")
    ANALYSIS_TEMPERATURE = float(os.environ.get("ANALYSIS_TEMPERATURE", "0"))
    CHAT_TEMPERATURE = 0.2
    MAX_OUTPUT_TOKENS = 4000
    CHAT_MAX_TOKENS = 2000
    REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "60"))

    # Analysis
    MAX_CONTRACT_LENGTH = 100000
    STRICT_VALIDATION = _env_flag("STRICT_VALIDATION")

    # File Upload
    UPLOAD_FOLDER = 'uploads'
    MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

    # API Settings
    API_HOST = "0.0.0.0"
    API_PORT = int(os.environ.get("PORT", "5001"))
    API_DEBUG = _env_flag("API_DEBUG")
    API_VERSION = "1.0.0"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


# Backward compatibility - keep module-level variables
OPENAI_API_KEY = Config.OPENAI_API_KEY
ANALYSIS_MODEL = Config.ANALYSIS_MODEL
CHAT_MODEL = Config.CHAT_MODEL
ANALYSIS_TEMPERATURE = Config.ANALYSIS_TEMPERATURE
CHAT_TEMPERATURE = Config.CHAT_TEMPERATURE
MAX_OUTPUT_TOKENS = Config.MAX_OUTPUT_TOKENS
CHAT_MAX_TOKENS = Config.CHAT_MAX_TOKENS
REQUEST_TIMEOUT = Config.REQUEST_TIMEOUT
MAX_CONTRACT_LENGTH = Config.MAX_CONTRACT_LENGTH
STRICT_VALIDATION = Config.STRICT_VALIDATION
UPLOAD_FOLDER = Config.UPLOAD_FOLDER
MAX_FILE_SIZE = Config.MAX_FILE_SIZE
API_HOST = Config.API_HOST
API_PORT = Config.API_PORT
API_DEBUG = Config.API_DEBUG
API_VERSION = Config.API_VERSION
LOG_LEVEL = Config.LOG_LEVEL
