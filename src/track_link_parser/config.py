import os
from dataclasses import dataclass
from typing import Any, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError


load_dotenv()


@dataclass(frozen=True)
class Settings:
    use: Optional[tuple[str, ...]]
    youtube_api_key: str
    soundcloud_client_id: str
    timeout: float

    def parser_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {
            "youtube": {"key": self.youtube_api_key, "timeout": self.timeout},
            "soundcloud": {"key": self.soundcloud_client_id, "timeout": self.timeout},
            "vimeo": {"timeout": self.timeout},
            "nicovideo": {"timeout": self.timeout},
            "bilibili": {"timeout": self.timeout},
            "dailymotion": {"timeout": self.timeout},
        }
        if self.use is not None:
            options["use"] = list(self.use)
        return options


def get_settings() -> Settings:
    raw_use = os.getenv("LINK_PARSER_USE", "").strip()
    use = tuple(name.strip().lower() for name in raw_use.split(",") if name.strip()) or None
    youtube_api_key = os.getenv("YOUTUBE_API_KEY", "").strip()
    soundcloud_client_id = os.getenv("SOUNDCLOUD_CLIENT_ID", "").strip()
    raw_timeout = os.getenv("LINK_PARSER_TIMEOUT", "20")
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ConfigurationError(f"LINK_PARSER_TIMEOUT must be a number, got {raw_timeout!r}") from None
    return Settings(
        use=use,
        youtube_api_key=youtube_api_key,
        soundcloud_client_id=soundcloud_client_id,
        timeout=timeout,
    )
