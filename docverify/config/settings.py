from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    image_engine: str = "pillow"

    ocr_engine: str = "tesseract"
    ocr_language: str = "eng"
    tesseract_cmd: str = ""

    classifier_engine: str = "keyword"
    classifier_model_path: str = ""

    pdf_engine: str = "pymupdf"
    pdf_render_dpi: int = Field(default=200, gt=0)

    capability_timeout_seconds: float = Field(default=30.0, gt=0)
    fraud_cache_retention_days: int = Field(default=30, ge=0)

    max_document_bytes: int = Field(default=50 * 1024 * 1024, gt=0)
    batch_max_workers: int = Field(default=4, gt=0)
    batch_max_documents: int = Field(default=10, gt=0)
