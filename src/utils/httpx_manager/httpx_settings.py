from pydantic_settings import BaseSettings


class HttpxSettings(BaseSettings):
    MAX_CONCURRENT_REQUESTS: int = 100
    MAX_CONNECTIONS: int = 50
    MAX_KEEPALIVE_CONNECTIONS: int = 10
    TIMEOUT: float = 30
    CLIENT_REQUEST_LIMIT: int = 50
    CLIENT_EXPIRE_SECONDS: int = 300  # 5 mins
    CLIENT_POOL_SIZE: int = 4

    class Config:
        env_prefix = "HTTPX_"
        env_file = ".env"
        extra = "ignore"


httpx_settings = HttpxSettings()
