"""
Configuration management for the Material Composition Extractor.
Handles environment variables, application settings and extraction bounds.
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")  # json or console

    # Extraction bounds (static caps keep work proportional to the page)
    MAX_HITS: int = int(os.getenv("MAX_HITS", "4"))
    LEAF_MAX_CHARS: int = int(os.getenv("LEAF_MAX_CHARS", "1200"))
    CONTAINER_MAX_CHARS: int = int(os.getenv("CONTAINER_MAX_CHARS", "8000"))
    CONTAINER_CHUNK_MAX_CHARS: int = int(os.getenv("CONTAINER_CHUNK_MAX_CHARS", "400"))
    FIELD_ENTRY_MAX_CHARS: int = int(os.getenv("FIELD_ENTRY_MAX_CHARS", "220"))
    LABELED_LINE_MAX_CHARS: int = int(os.getenv("LABELED_LINE_MAX_CHARS", "180"))

    @classmethod
    def get_extraction_bounds(cls) -> dict:
        """Return the extraction bounds for logging."""
        return {
            "max_hits": cls.MAX_HITS,
            "leaf_max_chars": cls.LEAF_MAX_CHARS,
            "container_max_chars": cls.CONTAINER_MAX_CHARS,
            "container_chunk_max_chars": cls.CONTAINER_CHUNK_MAX_CHARS,
            "field_entry_max_chars": cls.FIELD_ENTRY_MAX_CHARS,
            "labeled_line_max_chars": cls.LABELED_LINE_MAX_CHARS,
        }


config = Config()
