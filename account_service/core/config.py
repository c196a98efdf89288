from typing import Literal

from dotenv import load_dotenv
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    db_url: str
    env: Literal["prod", "dev"] = "prod"

    # Upstream OAuth provider
    oauth_base_url: str
    oauth_client_id: str = ""
    oauth_client_secret: str = ""
    oauth_redirect_uri: str = ""
    oauth_timeout_seconds: float = 10.0

    # JWT & token settings
    # IMPORTANT: set in environment for production
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"
    access_token_ttl_seconds: int = 60 * 60  # 1 hour
    refresh_token_ttl_seconds: int = 30 * 24 * 60 * 60  # 30 days
    oauth_state_ttl_seconds: int = 10 * 60  # 10 minutes

    @property
    def is_dev(self) -> bool:
        return self.env == "dev"


load_dotenv()
settings = Config()  # pyright: ignore[reportCallIssue]
