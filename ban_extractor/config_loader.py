# Path: ban_extractor/config_loader.py
"""
Configuration Loader for ban_extractor

Loads configuration from .env file and BAN_EXTRACTOR_* environment variables.
Singleton pattern ensures consistent configuration across all components.

Every value has a default, so the extractor runs without any .env file.
Command line options override these values per run.
"""

import os
from typing import Optional, Any
from pathlib import Path
from dotenv import load_dotenv

from .constants import (
    DEFAULT_RECORD_TAG,
    DEFAULT_IDENTIFIER_TAG,
    DEFAULT_READ_CHUNK_SIZE,
    DEFAULT_ZIP_COMPRESSION_LEVEL,
    DEFAULT_SSH_PORT,
    DEFAULT_SSH_TIMEOUT,
    DEFAULT_SSH_MAX_RETRIES,
)


# ==============================================================================
# DEFAULT CONFIGURATION VALUES
# ==============================================================================

# Logging Defaults
DEFAULT_LOG_LEVEL: str = 'INFO'
DEFAULT_ENVIRONMENT: str = 'production'


class ConfigLoader:
    """
    Singleton configuration loader for ban_extractor.

    Loads configuration from environment variables with type conversion
    and sensible defaults.

    Example:
        config = ConfigLoader()
        record_tag = config.get('record_tag')  # 'att:MixedBillService'
        chunk = config.get('read_chunk_size')  # Returns int
    """

    _instance: Optional['ConfigLoader'] = None
    _initialized: bool = False

    def __new__(cls) -> 'ConfigLoader':
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """
        Initialize configuration loader.

        Only runs once due to singleton pattern. Loads the .env file
        from the project root (parent of this package) when present.
        """
        if ConfigLoader._initialized:
            return

        # ban_extractor/config_loader.py -> .env is in the project root
        current_file = Path(__file__).resolve()
        project_root = current_file.parent.parent
        env_path = project_root / '.env'

        if env_path.exists():
            load_dotenv(dotenv_path=env_path, interpolate=True)

        self._config = self._load_configuration()
        ConfigLoader._initialized = True

    def _load_configuration(self) -> dict[str, Any]:
        """
        Load all configuration from environment.

        Returns:
            Dictionary of configuration values with proper types
        """
        config = {
            # ================================================================
            # ENVIRONMENT
            # ================================================================
            'environment': self._get_env('BAN_EXTRACTOR_ENVIRONMENT', DEFAULT_ENVIRONMENT),

            # ================================================================
            # RECORD STRUCTURE
            # ================================================================
            'record_tag': self._get_env('BAN_EXTRACTOR_RECORD_TAG', DEFAULT_RECORD_TAG),
            'identifier_tag': self._get_env(
                'BAN_EXTRACTOR_IDENTIFIER_TAG', DEFAULT_IDENTIFIER_TAG
            ),

            # ================================================================
            # STREAMING / COMPRESSION
            # ================================================================
            'read_chunk_size': self._get_int(
                'BAN_EXTRACTOR_READ_CHUNK_SIZE', DEFAULT_READ_CHUNK_SIZE
            ),
            'zip_compression_level': self._get_int(
                'BAN_EXTRACTOR_ZIP_LEVEL', DEFAULT_ZIP_COMPRESSION_LEVEL
            ),

            # ================================================================
            # SSH CONFIGURATION
            # ================================================================
            'ssh_port': self._get_int('BAN_EXTRACTOR_SSH_PORT', DEFAULT_SSH_PORT),
            'ssh_timeout': self._get_int('BAN_EXTRACTOR_SSH_TIMEOUT', DEFAULT_SSH_TIMEOUT),
            'ssh_max_retries': self._get_int(
                'BAN_EXTRACTOR_SSH_MAX_RETRIES', DEFAULT_SSH_MAX_RETRIES
            ),

            # ================================================================
            # LOGGING CONFIGURATION
            # ================================================================
            'log_dir': self._get_path('BAN_EXTRACTOR_LOG_DIR'),
            'log_level': self._get_env('BAN_EXTRACTOR_LOG_LEVEL', DEFAULT_LOG_LEVEL),
            'log_console': self._get_bool('BAN_EXTRACTOR_LOG_CONSOLE', True),
        }

        return config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return self._config.get(key, default)

    def _get_path(self, key: str, required: bool = False) -> Optional[Path]:
        """
        Get path from environment variable.

        Args:
            key: Environment variable name
            required: If True, raise error when missing

        Returns:
            Path object or None

        Raises:
            ValueError: If required and missing
        """
        value = os.getenv(key)

        if not value:
            if required:
                raise ValueError(f"Required path not configured: {key}")
            return None

        # Handle variable interpolation
        if '${' in value:
            value = os.path.expandvars(value)

        return Path(value)

    def _get_env(self, key: str, default: str = '') -> str:
        """Get string environment variable."""
        return os.getenv(key, default)

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable."""
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def _get_bool(self, key: str, default: bool) -> bool:
        """Get boolean environment variable."""
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ('true', '1', 'yes', 'on')

    def __repr__(self) -> str:
        """String representation showing record structure."""
        return (
            f"ConfigLoader("
            f"record_tag={self._config.get('record_tag')}, "
            f"identifier_tag={self._config.get('identifier_tag')}, "
            f"environment={self._config.get('environment')})"
        )


__all__ = ['ConfigLoader']
