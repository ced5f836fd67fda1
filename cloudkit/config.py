"""
Central configuration for the cloudkit client library.

This module contains the library settings and constants.
All other modules import configuration from here to maintain consistency.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class Config:
    """Library configuration and constants"""

    # ==========================================
    # Date Codec Settings
    # ==========================================
    # Format used by the CLI when none is given (see WireFormat.from_name)
    DEFAULT_DATE_FORMAT = os.getenv("DEFAULT_DATE_FORMAT", "rfc1123")

    # RFC 822 two digit years: yy >= pivot -> 19yy, otherwise 20yy
    RFC822_CENTURY_PIVOT = int(os.getenv("RFC822_CENTURY_PIVOT", "69"))

    # ==========================================
    # Logging Configuration
    # ==========================================
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")          # DEBUG, INFO, WARNING, ERROR
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    # ==========================================
    # Class Methods
    # ==========================================
    @classmethod
    def validate_environment(cls) -> bool:
        """
        Validate that the environment overrides are usable.

        Returns:
            bool: True if environment is valid, False otherwise
        """
        problems = []

        if not 0 <= cls.RFC822_CENTURY_PIVOT <= 99:
            problems.append(f"RFC822_CENTURY_PIVOT={cls.RFC822_CENTURY_PIVOT} (expected 0-99)")

        if cls.LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            problems.append(f"LOG_LEVEL={cls.LOG_LEVEL}")

        if problems:
            print(f"Invalid environment variables: {', '.join(problems)}")
            return False

        return True

    @classmethod
    def print_config_summary(cls) -> None:
        """Print configuration summary for debugging"""
        print("=" * 60)
        print("cloudkit - Configuration Summary")
        print("=" * 60)
        print(f"Default date format:  {cls.DEFAULT_DATE_FORMAT}")
        print(f"RFC 822 pivot year:   {cls.RFC822_CENTURY_PIVOT}")
        print(f"Log level:            {cls.LOG_LEVEL}")
        print("=" * 60)
