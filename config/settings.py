from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Goldsky subgraph (pump-charts indexer)
    goldsky_endpoint: str = (
        "https://api.goldsky.com/api/public/project_cmjjrebt3mxpt01rm9yi04vqq"
        "/subgraphs/pump-charts/v2/gn"
    )
    goldsky_page_size: int = 50
    goldsky_max_rps: float = 2.0
    goldsky_timeout_sec: float = 10.0

    # Poller: leaderboard refreshes every few seconds
    poll_interval_sec: float = 5.0

    # IPFS image resolution
    ipfs_gateways: str = (
        "https://olive-defensive-giraffe-83.mypinata.cloud/ipfs/,"
        "https://gateway.pinata.cloud/ipfs/,"
        "https://ipfs.io/ipfs/"
    )
    ipfs_timeout_sec: float = 4.0
    image_cache_ttl_sec: int = 3600
    image_cache_max_size: int = 1000

    # Battles / tournament
    live_battle_count: int = 4  # curves taken for the home page battles (2 battles)
    bracket_size: int = 8

    # API
    api_enabled: bool = True
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    api_access_log: bool = False
    api_image_rate_limit: str = "30/minute"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False
    log_dir: str = "logs"

    @property
    def ipfs_gateway_list(self) -> list[str]:
        return [g.strip() for g in self.ipfs_gateways.split(",") if g.strip()]


settings = Settings()
