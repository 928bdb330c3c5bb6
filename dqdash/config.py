import os
from pydantic import BaseModel, Field
from typing import Optional

class AppConfig(BaseModel):
    api_url: str = Field(default="http://localhost:8000/api", description="Base URL of the dataset analysis API")
    api_mode: str = Field(default="live", description="Client backend: live (HTTP) or mock (canned report)")
    timeout: float = Field(default=30.0, description="Request timeout in seconds, applies to uploads too")
    max_upload_mb: int = Field(default=50, description="Largest CSV accepted before upload")
    debug: bool = Field(default=False, description="Show the debug panel in the dashboard")
    log_level: str = "INFO"
    outputs_dir: str = "outputs"
    user_agent: Optional[str] = None

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")

def load_config(json_path: str = "config_example.json") -> AppConfig:
    import json
    config_data = {}
    if os.path.exists(json_path):
        try:
            with open(json_path, "r") as f:
                config_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"[CONFIG] Warning: Could not load {json_path}: {e}")

    # Environment variables override config file
    env_api_url = os.environ.get("DQDASH_API_URL")
    if env_api_url:
        config_data["api_url"] = env_api_url

    env_api_mode = os.environ.get("DQDASH_API_MODE")
    if env_api_mode:
        config_data["api_mode"] = env_api_mode

    env_timeout = os.environ.get("DQDASH_TIMEOUT")
    if env_timeout:
        config_data["timeout"] = float(env_timeout)

    env_debug = os.environ.get("DQDASH_DEBUG")
    if env_debug:
        config_data["debug"] = _parse_bool(env_debug)

    env_log_level = os.environ.get("DQDASH_LOG_LEVEL")
    if env_log_level:
        config_data["log_level"] = env_log_level.upper()

    return AppConfig(**config_data)

CONFIG = load_config()
