from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    http_host: str = "0.0.0.0"
    http_port: int = 8000
    cors_origins: str = "http://localhost:3000"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "knowledge"
    db_username: str = "knowledge"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    supabase_url: str = ""
    supabase_service_key: str = ""
    storage_bucket: str = "documents"
    signed_url_expiry_seconds: int = 3600
    collaborator_timeout_seconds: int = 15

    rate_limit_per_minute: int = 30
    rate_limit_storage_uri: str = "memory://"
    max_upload_bytes: int = 50 * 1024 * 1024
    max_document_bytes: int = 50 * 1024 * 1024

    worker_poll_interval_seconds: int = 5
    worker_pending_grace_seconds: int = 60

    structured_parser_api_token: str = ""
    structured_parser_model: str = (
        "bytedance/dolphin:19f1ad93970c2bf21442a842d01d97fb04a94a69d2b36dee43531a9cbae07e85"
    )
    structured_parser_base_url: str = "https://api.replicate.com/v1"
    structured_parser_timeout_seconds: float = 300.0
    structured_parser_max_attempts: int = 3
    structured_parser_backoff_seconds: float = 2.0
    structured_parser_min_result_length: int = 5

    ocr_api_key: str = ""
    ocr_base_url: str = "https://api.ocr.space"
    ocr_language: str = "eng"
    ocr_timeout_seconds: float = 60.0
    ocr_max_attempts: int = 2
    ocr_backoff_seconds: float = 1.0
    ocr_min_result_length: int = 5

    vision_providers: str = "openai"
    vision_timeout_seconds: float = 120.0
    vision_max_attempts: int = 2
    vision_backoff_seconds: float = 2.0
    vision_min_result_length: int = 5
    vision_openai_api_key: str = ""
    vision_openai_model_name: str = "gpt-4o-mini"
    vision_openai_compatible_api_key: str = ""
    vision_openai_compatible_model_name: str = ""
    vision_openai_compatible_base_url: str = ""
    vision_openrouter_api_key: str = ""
    vision_openrouter_model_name: str = "openai/gpt-4o-mini"
    vision_groq_api_key: str = ""
    vision_groq_model_name: str = ""
    vision_together_api_key: str = ""
    vision_together_model_name: str = ""

    native_pdf_engine: str = "pdfplumber"
    native_pdf_timeout_seconds: float = 30.0
    native_pdf_max_attempts: int = 1
    native_pdf_min_result_length: int = 5

    plain_text_timeout_seconds: float = 30.0
    plain_text_max_attempts: int = 1
    plain_text_min_result_length: int = 5
