"""
bucketfs Configuration

We read configuration from 2 sources, in order of precedence (higher is more priority)
- Environment variables
- A .env file, either in the current working directory or in a location specified
  by the BUCKETFS_ENV_FILE environment variable
"""

import functools
from pathlib import Path
from typing import Annotated

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bucketfs.paths import normalize_base_folder

ENV_PREFIX = "bucketfs_"

#: Number of keys requested per listing page (the S3 maximum)
DEFAULT_PAGE_SIZE = 1000


class Settings(BaseSettings):
    env_file: Annotated[
        Path,
        Field(
            description="Location of a .env file (if used) relative to working directory",
        ),
    ] = Path(".env")

    s3_host: Annotated[
        str | None,
        Field(
            description=(
                "Endpoint url of an S3 compatible object store (e.g. http://localhost:9000 for MinIO). "
                "Leave empty to use AWS S3"
            )
        ),
    ] = None
    s3_region: Annotated[str | None, Field(description="Region of the bucket")] = None
    s3_access_key: Annotated[str | None, Field(description="Access key id. Leave empty to use the default AWS chain")] = None
    s3_secret_key: Annotated[str | None, Field(description="Secret access key")] = None

    bucket: Annotated[str | None, Field(description="Bucket holding the file system")] = None
    base_folder: Annotated[
        str,
        Field(description="Folder inside the bucket that is used as the root of the file system"),
    ] = ""
    page_size: Annotated[int, Field(description="Maximum number of entries per listing page", gt=0, le=1000)] = (
        DEFAULT_PAGE_SIZE
    )
    create_bucket: Annotated[bool, Field(description="Create the bucket on startup if it does not exist")] = False

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)


class StoreConfig(BaseModel):
    """
    Configuration of a single PathStore. This is fixed for the lifetime of the store.
    """

    bucket: str
    base_folder: str = ""
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, gt=0, le=1000)

    model_config = ConfigDict(frozen=True)

    @field_validator("base_folder", mode="before")
    @classmethod
    def normalize_base(cls, value: str | None) -> str:
        return normalize_base_folder(value)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "StoreConfig":
        settings = settings or get_settings()
        if not settings.bucket:
            raise ValueError(f"No bucket configured, set {ENV_PREFIX.upper()}BUCKET")
        return cls(bucket=settings.bucket, base_folder=settings.base_folder, page_size=settings.page_size)


@functools.lru_cache()
def get_settings() -> Settings:
    temp = Settings()
    load_dotenv(temp.env_file, override=False)
    return Settings()


def settings_for_display(settings: Settings | None = None) -> dict[str, str]:
    """Return the settings as environment variables, with the secret key masked"""
    settings = settings or get_settings()
    result = {}
    for k, v in settings.model_dump().items():
        if k == "s3_secret_key" and v:
            v = "********"
        result[f"{ENV_PREFIX.upper()}{k.upper()}"] = str(v)
    return result


if __name__ == "__main__":
    # Echo the settings
    for key, value in settings_for_display().items():
        print(f"{key}={value}")
