"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """LLM provider configuration."""

    model_config = SettingsConfigDict(env_prefix="LLM_")

    provider: Literal["ollama"] = "ollama"
    model_name: str = "llama3.2"
    host: str = "http://localhost:11434"
    timeout: int = 120
    max_tokens: int = 2000
    temperature: float = 0.1

    # Circuit breaker settings
    failure_threshold: int = 3
    cooldown_seconds: int = 60

    # Transport retry settings (1 attempt = failures surface immediately)
    max_retries: int = 1
    retry_delay: float = 1.0
    retry_multiplier: float = 2.0


class OCRSettings(BaseSettings):
    """OCR engine configuration."""

    model_config = SettingsConfigDict(env_prefix="OCR_")

    language: str = "eng"
    tesseract_cmd: str | None = None
    pdf_dpi: int = 300


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "shelfwise.db"
    upload_dir_name: str = "uploads"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name

    @property
    def upload_dir(self) -> Path:
        return self.data_dir / self.upload_dir_name


class UploadSettings(BaseSettings):
    """Invoice upload limits."""

    model_config = SettingsConfigDict(env_prefix="UPLOAD_")

    max_upload_size: int = 20 * 1024 * 1024  # 20 MB
    allowed_extensions: list[str] = [
        ".pdf",
        ".png",
        ".jpg",
        ".jpeg",
        ".tif",
        ".tiff",
        ".bmp",
        ".webp",
    ]


class InventorySettings(BaseSettings):
    """Inventory policy configuration."""

    model_config = SettingsConfigDict(env_prefix="INVENTORY_")

    # "append" writes a new snapshot per sale line, "in_place" rewrites the newest one
    csv_decrement_mode: Literal["append", "in_place"] = "append"
    estimated_cost_ratio: float = 0.7


class ReconciliationThresholds(BaseSettings):
    """Confidence and anomaly thresholds for invoice reconciliation."""

    model_config = SettingsConfigDict(env_prefix="RECON_")

    # Matching
    barcode_confidence: float = 0.99
    sku_confidence: float = 0.95
    containment_weight: float = 0.8
    token_overlap_weight: float = 0.7
    token_overlap_floor: float = 0.3

    # Pricing alerts (percent)
    price_change_threshold: float = 10.0
    price_spike_threshold: float = 25.0
    margin_floor: float = 15.0
    margin_critical: float = 5.0
    price_trend_min_increases: int = 3

    # Totals validation (absolute currency units)
    total_tolerance: float = 1.0

    # Overall confidence
    ocr_weight: float = 0.4
    match_weight: float = 0.6
    review_threshold: float = 0.9
    high_confidence_threshold: float = 0.85


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Shelfwise"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    llm: LLMSettings = Field(default_factory=LLMSettings)
    ocr: OCRSettings = Field(default_factory=OCRSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)
    inventory: InventorySettings = Field(default_factory=InventorySettings)
    thresholds: ReconciliationThresholds = Field(default_factory=ReconciliationThresholds)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
