from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import SecretStr


class Settings(BaseSettings):
    # Embedding provider (OpenAI-compatible)
    openai_api_key: SecretStr = SecretStr("")
    embedding_model: str = "text-embedding-3-small"
    embedding_base_url: str = "https://api.openai.com/v1/embeddings"
    embedding_timeout: float = 30.0  # seconds, per provider call
    embedding_concurrency: int = 8

    # Inbound JWT verification
    jwt_client_secret: SecretStr = SecretStr("")
    jwt_algo: str = "HS256"
    jwt_issuer: str = "pdf-rag-client"
    jwt_audience: str = "pdf-rag-server"

    # Chunking & retrieval
    chunk_min_size: int = 700
    chunk_max_size: int = 900

    # Upload limits
    max_upload_bytes: int = 50 * 1024 * 1024

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
