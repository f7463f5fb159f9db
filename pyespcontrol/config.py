"""
 Configuration for pyespcontrol

 Settings are read from environment variables (or a .env file in the
 working directory):

    ESP_HOST             - Controller IP or hostname (default: 192.168.4.1)
    ESP_HTTPS            - Use https "yes"/"no" (default: "no")
    ESP_TIMEOUT          - Seconds for ordinary API calls (default: 10)
    ESP_PROBE_TIMEOUT    - Seconds for reconnection probes (default: 5)
    ESP_POLL_INTERVAL    - Status poll cadence in seconds (default: 10)
    ESP_BACKOFF_INITIAL  - First reconnection delay in ms (default: 1000)
    ESP_BACKOFF_FACTOR   - Delay multiplier per attempt (default: 1.5)
    ESP_BACKOFF_MAX      - Maximum reconnection delay in ms (default: 30000)
    ESP_RESTORE_BANNER   - How long "Connection restored" shows, ms (default: 2000)
    ESP_POOL_MAXSIZE     - HTTP connection pool size, 0 disables re-use (default: 10)
    ESP_LED_SLAVE_ID     - Default LED Modbus slave id (default: 10)
    ESP_INITIAL_TAB      - Module activated on start (default: actuators)
    ESP_DEBUG            - Enable debug logging "yes"/"no" (default: "no")
"""
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings."""

    host: str = Field(default="192.168.4.1", alias="ESP_HOST")
    https: bool = Field(default=False, alias="ESP_HTTPS")
    timeout: float = Field(default=10, alias="ESP_TIMEOUT")
    probe_timeout: float = Field(default=5.0, alias="ESP_PROBE_TIMEOUT")
    poll_interval: float = Field(default=10, alias="ESP_POLL_INTERVAL")
    backoff_initial: int = Field(default=1000, alias="ESP_BACKOFF_INITIAL")
    backoff_factor: float = Field(default=1.5, alias="ESP_BACKOFF_FACTOR")
    backoff_max: int = Field(default=30000, alias="ESP_BACKOFF_MAX")
    restore_banner: int = Field(default=2000, alias="ESP_RESTORE_BANNER")
    pool_maxsize: int = Field(default=10, alias="ESP_POOL_MAXSIZE")
    led_slave_id: int = Field(default=10, alias="ESP_LED_SLAVE_ID")
    initial_tab: str = Field(default="actuators", alias="ESP_INITIAL_TAB")
    debug: bool = Field(default=False, alias="ESP_DEBUG")

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "populate_by_name": True,
        "env_file": ".env",
        "extra": "ignore",
    }
