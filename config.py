"""
Configuration management for the business card extraction service.

Handles environment variables, recognizer settings and application settings.
"""

import os
import logging
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """Application configuration class.

    Attributes:
        DEBUG: Enable debug mode
        TESTING: Enable testing mode
        SECRET_KEY: Flask secret key
        MAX_CONTENT_LENGTH: Maximum upload file size (16MB default)
        ALLOWED_EXTENSIONS: Allowed image file extensions
        OCR_LANGUAGES: Default recognizer language selector ("eng", "eng+rus")
        REVIEW_SCORE_THRESHOLD: Cards scoring below this are flagged for review
    """

    # Flask Settings
    DEBUG: bool = _env_bool("CARDSCAN_DEBUG", "False")
    TESTING: bool = _env_bool("CARDSCAN_TESTING", "False")
    SECRET_KEY: str = os.getenv("CARDSCAN_SECRET_KEY", "dev-secret-key-change-in-production")

    # File Upload Settings
    MAX_CONTENT_LENGTH: int = 16 * 1024 * 1024  # 16MB max file size
    ALLOWED_EXTENSIONS: set = {"png", "jpg", "jpeg", "gif", "bmp", "webp"}

    # Recognizer Settings
    OCR_LANGUAGES: str = os.getenv("CARDSCAN_OCR_LANGUAGES", "eng")
    OCR_GPU: bool = _env_bool("CARDSCAN_OCR_GPU", "False")
    OCR_MODEL_DIR: str = os.getenv("CARDSCAN_OCR_MODEL_DIR", "./models")

    # Recognition passes
    ENHANCED_PASS: bool = _env_bool("CARDSCAN_ENHANCED_PASS", "True")
    SPARSE_PASS: bool = _env_bool("CARDSCAN_SPARSE_PASS", "True")
    ENHANCE_MAX_WIDTH: int = int(os.getenv("CARDSCAN_ENHANCE_MAX_WIDTH", "2600"))
    ENHANCE_MAX_SCALE: float = float(os.getenv("CARDSCAN_ENHANCE_MAX_SCALE", "2.0"))
    ENHANCE_CONTRAST: float = float(os.getenv("CARDSCAN_ENHANCE_CONTRAST", "1.45"))

    # Result review
    REVIEW_SCORE_THRESHOLD: int = int(os.getenv("CARDSCAN_REVIEW_SCORE_THRESHOLD", "100"))

    # Batch processing
    PARALLEL_WORKERS: int = int(os.getenv("CARDSCAN_PARALLEL_WORKERS", "2"))

    # Logging
    LOG_LEVEL: str = os.getenv("CARDSCAN_LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def init_app(cls, app) -> None:
        """Initialize Flask app with configuration.

        Args:
            app: Flask application instance
        """
        app.config.from_object(cls)

        # Configure logging
        logging.basicConfig(
            level=getattr(logging, cls.LOG_LEVEL.upper()),
            format=cls.LOG_FORMAT
        )

        logger.info("Configuration initialized successfully")

    @classmethod
    def is_allowed_file(cls, filename: str) -> bool:
        """Check if file extension is allowed.

        Args:
            filename: Name of the file to check

        Returns:
            True if file extension is allowed, False otherwise
        """
        return "." in filename and \
            filename.rsplit(".", 1)[1].lower() in cls.ALLOWED_EXTENSIONS

    @classmethod
    def get_pass_status(cls) -> dict:
        """Get which recognition passes are enabled.

        Returns:
            Dictionary with pass availability
        """
        return {
            "original": True,
            "enhanced": cls.ENHANCED_PASS,
            "sparse": cls.SPARSE_PASS
        }


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    LOG_LEVEL = "INFO"


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    LOG_LEVEL = "DEBUG"


# Configuration mapping
config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig
}


def get_config(config_name: Optional[str] = None) -> Config:
    """Get configuration class by name.

    Args:
        config_name: Configuration name (development, production, testing)

    Returns:
        Configuration class
    """
    if config_name is None:
        config_name = os.getenv("CARDSCAN_ENV", "development")
    return config_by_name.get(config_name, DevelopmentConfig)
