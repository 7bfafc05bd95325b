import os
from datetime import timedelta

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from employee_api.services.circuit_breaker import CircuitBreakerConfig
from employee_api.services.retry import RetryPolicy

load_dotenv()


class Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Upstream Employee API
    employee_api_base_url: str = Field(
        default="http://localhost:8112/api/v1/employee", alias="EMPLOYEE_API_BASE_URL"
    )
    employee_api_timeout: float = Field(default=5.0, alias="EMPLOYEE_API_TIMEOUT")
    employee_api_connect_timeout: float = Field(
        default=2.0, alias="EMPLOYEE_API_CONNECT_TIMEOUT"
    )
    employee_api_read_timeout: float = Field(
        default=3.0, alias="EMPLOYEE_API_READ_TIMEOUT"
    )

    # Retry Configuration
    retry_max_attempts: int = Field(default=3, ge=1, alias="RETRY_MAX_ATTEMPTS")
    retry_delay_ms: int = Field(default=200, ge=0, alias="RETRY_DELAY_MS")
    retry_jitter_ms: int = Field(default=0, ge=0, alias="RETRY_JITTER_MS")

    # Circuit Breaker Configuration
    cb_sliding_window_size: int = Field(default=10, ge=1, alias="CB_SLIDING_WINDOW_SIZE")
    cb_minimum_calls: int = Field(default=10, ge=1, alias="CB_MINIMUM_CALLS")
    cb_failure_rate_threshold: float = Field(
        default=50.0, gt=0, le=100, alias="CB_FAILURE_RATE_THRESHOLD"
    )
    cb_open_seconds: float = Field(default=60.0, ge=0, alias="CB_OPEN_SECONDS")

    # Server Configuration
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    server_host: str = Field(default="0.0.0.0", alias="SERVER_HOST")
    server_port: int = Field(default=8111, alias="SERVER_PORT")

    def circuit_breaker_config(self) -> CircuitBreakerConfig:
        return CircuitBreakerConfig(
            sliding_window_size=self.cb_sliding_window_size,
            minimum_calls=self.cb_minimum_calls,
            failure_rate_threshold=self.cb_failure_rate_threshold,
            open_timeout=timedelta(seconds=self.cb_open_seconds),
        )

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.retry_max_attempts,
            delay=timedelta(milliseconds=self.retry_delay_ms),
            jitter=timedelta(milliseconds=self.retry_jitter_ms),
        )


def load_settings() -> Settings:
    """Build settings from the process environment."""
    return Settings.model_validate(dict(os.environ))


global_settings = load_settings()
