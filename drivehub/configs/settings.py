from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    APP_NAME: str = "DriveHub"
    APP_ENV: Literal["dev", "prod"] = "dev"
    APP_DEBUG: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_prefix="APP_", extra="ignore")


class CORSSettings(BaseSettings):
    CORS_ORIGINS: list[str] = ["http://127.0.0.1:3000", "http://localhost:3000"]
    CORS_CREDENTIALS: bool = True
    CORS_METHODS: list[str] = ["*"]
    CORS_HEADERS: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CORS_", extra="ignore")


class MongoSettings(BaseSettings):
    MONGO_HOST: str = ""
    MONGO_PORT: int = 27017
    MONGO_DB: str = "drivehub"
    MONGO_USER: str = ""
    MONGO_PWD: str = ""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MONGO_", extra="ignore")

    @property
    def MONGO_URL(self) -> str:
        host = self.MONGO_HOST or "localhost"
        port = self.MONGO_PORT or 27017
        if self.MONGO_USER and self.MONGO_PWD:
            return f"mongodb://{self.MONGO_USER}:{self.MONGO_PWD}@{host}:{port}"
        return f"mongodb://{host}:{port}"


class MinioSettings(BaseSettings):
    MINIO_URL: str = "http://localhost:9000"
    MINIO_ACCESS_KEY: str = ""
    MINIO_SECRET_KEY: str = ""
    MINIO_BUCKET: str = "drivehub"
    MINIO_URL_EXPIRE_MINUTES: int = 10
    MINIO_MAX_RETRIES: int = 3
    MINIO_RETRY_BACKOFF: float = 0.5

    @property
    def MINIO_SSL(self) -> bool:
        return self.MINIO_URL.startswith("https://")

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MINIO_", extra="ignore")


class AuthSettings(BaseSettings):
    AUTH_JWT_SECRET: str = "change-me"
    AUTH_JWT_ALGORITHM: str = "HS256"
    AUTH_JWT_EXPIRE_DAYS: int = 7
    AUTH_BCRYPT_ROUNDS: int = 12
    AUTH_COOKIE_NAME: str = "token"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="AUTH_", extra="ignore")


DEFAULT_ALLOWED_TYPES = [
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/pdf",
    "text/plain",
    "text/csv",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "application/zip",
    "application/x-rar-compressed",
    "video/mp4",
    "video/avi",
    "video/quicktime",
    "audio/mpeg",
    "audio/wav",
    "application/json",
]


class UploadSettings(BaseSettings):
    UPLOAD_MAX_FILE_SIZE: int = 100 * 1024 * 1024
    UPLOAD_ALLOWED_TYPES: list[str] = DEFAULT_ALLOWED_TYPES
    UPLOAD_MAX_FOLDER_DEPTH: int = 256

    model_config = SettingsConfigDict(env_file=".env", env_prefix="UPLOAD_", extra="ignore")


class Settings(AppSettings, CORSSettings, MongoSettings, MinioSettings, AuthSettings, UploadSettings):
    RELEASE: str | None = None
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    model_config = SettingsConfigDict(env_file=".env", env_prefix="", extra="ignore")


settings = Settings()
