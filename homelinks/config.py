import os
from pathlib import Path

from pydantic import BaseModel

ENV_PREFIX = "HOMELINKS_"


class Config(BaseModel):
    data_file: Path = Path("data") / "home-links.json"
    upload_dir: Path = Path("public") / "uploads"
    host: str = "127.0.0.1"
    port: int = 8765
    admin_user: str = "admin"
    health_timeout: float = 5.0  # seconds
    log_level: str = "INFO"
    open_browser: bool = True


def load_config(environ=None) -> Config:
    """Build a :class:`Config` from ``HOMELINKS_*`` environment variables."""
    environ = os.environ if environ is None else environ
    values = {}
    for name in Config.model_fields:
        raw = environ.get(ENV_PREFIX + name.upper())
        if raw is not None and raw != "":
            values[name] = raw
    # pydantic coerces the strings ("8765", "0", "false", ...)
    return Config.model_validate(values)
