from enum import Enum
from pathlib import Path

from pydantic_settings import BaseSettings


ROOT = Path(__file__).resolve().parent.parent


class Env(Enum):
    local = "local"
    dev = "dev"
    prod = "prod"


class Config(BaseSettings):
    env: Env = Env.local
    html_dir: Path = ROOT / "assets/html"
    assets_dir: Path = ROOT / "assets"
    api_base: str = "http://localhost:3001"
    request_timeout: float = 20
    log_level: str = "INFO"
    wizard_cookie: str = "order_wizard"
    access_token_cookie: str = "access_token"
    max_wizards: int = 1000
    wizard_ttl: float = 60 * 60
