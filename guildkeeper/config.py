import os
from dataclasses import dataclass

@dataclass(frozen=True)
class Settings:
    token: str
    redis_url: str = "redis://localhost:6379/0"
    # Upper bound on pooled connections shared by the whole process
    redis_max_connections: int = 80
    default_prefix: str = "+"
    log_level: str = "INFO"

def load_settings() -> Settings:
    token = os.getenv("DISCORD_BOT_TOKEN", "").strip()
    return Settings(
        token=token or "",
        redis_url=os.getenv("REDIS_URL", "").strip() or Settings.redis_url,
        redis_max_connections=int(
            os.getenv("REDIS_MAX_CONNECTIONS", "").strip()
            or Settings.redis_max_connections
        ),
        default_prefix=os.getenv("BOT_PREFIX", "").strip() or Settings.default_prefix,
        log_level=os.getenv("LOG_LEVEL", "").strip().upper() or Settings.log_level,
    )
