import os
import json
from dataclasses import dataclass
from typing import Optional, Dict, Any

# ============================================
# DEFAULTS
# ============================================
DEFAULT_LLM_BASE_URL = "https://api.deepseek.com"
DEFAULT_LLM_MODEL = "deepseek-chat"
DEFAULT_SERVICE_ACCOUNT_PATH = "serviceAccountKey.json"


@dataclass
class Config:
    """Process-wide settings, built once at startup and handed to create_app."""

    service_account_json: Optional[str] = None
    service_account_path: str = DEFAULT_SERVICE_ACCOUNT_PATH
    llm_api_key: Optional[str] = None
    llm_base_url: str = DEFAULT_LLM_BASE_URL
    llm_model: str = DEFAULT_LLM_MODEL
    llm_timeout: float = 30.0
    host: str = "0.0.0.0"
    port: int = 8000
    generation_workers: int = 4

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        return cls(
            service_account_json=env.get("FIREBASE_SERVICE_ACCOUNT_KEY") or env.get("SERVICE_ACCOUNT_KEY"),
            service_account_path=env.get("GOOGLE_APPLICATION_CREDENTIALS", DEFAULT_SERVICE_ACCOUNT_PATH),
            llm_api_key=env.get("LLM_API_KEY") or env.get("DEEPSEEK_API_KEY"),
            llm_base_url=env.get("LLM_BASE_URL", DEFAULT_LLM_BASE_URL),
            llm_model=env.get("LLM_MODEL", DEFAULT_LLM_MODEL),
            llm_timeout=float(env.get("LLM_TIMEOUT", "30")),
            host=env.get("HOST", "0.0.0.0"),
            port=int(env.get("PORT", "8000")),
            generation_workers=int(env.get("GENERATION_WORKERS", "4")),
        )

    def validate(self):
        if not self.llm_api_key:
            raise ValueError("LLM_API_KEY not set")
        if not self.service_account_json and not os.path.exists(self.service_account_path):
            raise ValueError(
                "Firebase credentials not found. Set FIREBASE_SERVICE_ACCOUNT_KEY or "
                "GOOGLE_APPLICATION_CREDENTIALS, or place serviceAccountKey.json in the working directory"
            )
        if self.generation_workers < 1:
            raise ValueError("GENERATION_WORKERS must be at least 1")

    def service_account_info(self) -> Dict[str, Any]:
        """Parsed service account; the inline JSON wins over the key file."""
        if self.service_account_json:
            return json.loads(self.service_account_json)
        with open(self.service_account_path, "r", encoding="utf-8") as f:
            return json.load(f)
