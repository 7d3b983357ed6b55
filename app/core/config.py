from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Optional

def parse_comma_list(v):
    """Parse comma-separated string into list. 'none' means empty."""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        if v.strip().lower() == 'none':
            return []
        return [x.strip() for x in v.split(',') if x.strip() and x.strip().lower() != 'none']
    return []

class Settings(BaseSettings):
    # App Settings
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "/var/log/response-parser/app.log"

    # Parser memoization (0 disables the cache)
    PARSER_CACHE_SIZE: int = 256

    # HTTP adapter
    API_ENABLED: bool = True
    API_PORT: int = 10002
    CORS_ORIGINS: Optional[str] = None

    # API Keys (format: key1:userId1,key2:userId2)
    API_KEYS: Optional[str] = None

    @field_validator('PARSER_CACHE_SIZE', 'API_PORT', mode='before')
    @classmethod
    def parse_optional_int(cls, v, info):
        if v is None or v == '':
            defaults = {'PARSER_CACHE_SIZE': 256, 'API_PORT': 10002}
            return defaults.get(info.field_name)
        return int(v)

    @property
    def cors_origins_list(self) -> List[str]:
        return parse_comma_list(self.CORS_ORIGINS)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore unknown env vars

settings = Settings()
