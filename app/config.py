from enum import Enum
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


ROOT = Path(__file__).resolve().parent.parent


class Env(Enum):
    local = "local"
    dev = "dev"
    prod = "prod"


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: Env = Env.local
    html_dir: Path = ROOT / "assets/html"
    assets_dir: Path = ROOT / "assets"
    output_dir: Path = Path("out")
    log_level: str = "INFO"

    contentful_space_id: str
    contentful_access_key: str
    contentful_environment: str = "master"
    contentful_host: str = "cdn.contentful.com"
    request_timeout: float = 20

    content_type: str = "recipe"
    revalidate_seconds: float = 1
    listing_revalidate_seconds: float | None = None
    prerender: bool = True
