import os

from dotenv import load_dotenv

# Load .env file variables into environment
load_dotenv(verbose=True)


class Settings:
    """Inspector configuration settings loaded from environment variables."""

    DEFAULT_PREVIEW_LENGTH: int = 64
    DEFAULT_TIMESTAMP_FORMAT: str = "%H:%M:%S"

    def get_log_level(self, default: str = "INFO") -> str:
        """Gets the configured log level, defaulting if not set."""
        return os.getenv("LOG_LEVEL", default).upper()

    def get_preview_length(self, default: int = DEFAULT_PREVIEW_LENGTH) -> int:
        """Returns the maximum number of characters shown in a payload preview."""
        length_str = os.getenv("NET_INSPECTOR_PREVIEW_LENGTH")
        if length_str is None:
            return default
        try:
            length = int(length_str)
        except ValueError:
            raise ValueError("NET_INSPECTOR_PREVIEW_LENGTH environment variable must be an integer.")
        if length < 1:
            raise ValueError("NET_INSPECTOR_PREVIEW_LENGTH must be a positive integer.")
        return length

    def get_timestamp_format(self, default: str = DEFAULT_TIMESTAMP_FORMAT) -> str:
        """Returns the strftime format used for timestamps in descriptions."""
        return os.getenv("NET_INSPECTOR_TIMESTAMP_FORMAT", default)
