"""
Application settings and configuration management.
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field
import yaml

from .statistics import ClassificationFailurePolicy


class InboxSettings(BaseSettings):
    """Inbox provider configuration."""
    base_url: str = Field(default="http://localhost:8100", description="Inbox service root URL")
    secret: Optional[str] = Field(default=None, description="Mailbox secret used to authenticate fetches")
    fetch_limit: int = Field(default=10, description="Number of messages fetched per refresh")
    timeout: float = Field(default=15.0, description="Request timeout in seconds")

    class Config:
        env_prefix = "INBOX_"


class ClassifierSettings(BaseSettings):
    """Threat classifier configuration."""
    base_url: str = Field(default="http://localhost:8101", description="Classifier service root URL")
    api_key: Optional[str] = Field(default=None, description="Classifier API key")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")

    class Config:
        env_prefix = "CLASSIFIER_"


class LedgerSettings(BaseSettings):
    """Proof ledger and wallet configuration."""
    base_url: str = Field(default="http://localhost:8102", description="Prover/ledger service root URL")
    wallet_url: str = Field(default="http://localhost:8103", description="Wallet bridge root URL")
    api_key: Optional[str] = Field(default=None, description="Ledger API key")
    network: str = Field(default="devnet", description="Ledger network name")
    timeout: float = Field(default=30.0, description="Request timeout in seconds")

    class Config:
        env_prefix = "LEDGER_"


class ReputationSettings(BaseSettings):
    """Reputation scorer configuration."""
    base_url: str = Field(default="http://localhost:8104", description="Reputation service root URL")
    api_key: Optional[str] = Field(default=None, description="Reputation API key")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")

    class Config:
        env_prefix = "REPUTATION_"


class ServerSettings(BaseSettings):
    """HTTP server configuration."""
    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=8008, description="Bind port")

    class Config:
        env_prefix = "SERVER_"


class Settings(BaseSettings):
    """Main application settings."""
    # Environment
    environment: str = Field(default="development", description="Application environment")
    debug: bool = Field(default=True, description="Enable debug mode")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Pipeline
    classification_failure_policy: ClassificationFailurePolicy = Field(
        default=ClassificationFailurePolicy.EXCLUDE,
        description="How messages whose classification failed are counted in statistics"
    )

    # Component settings
    inbox: InboxSettings = Field(default_factory=InboxSettings)
    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    reputation: ReputationSettings = Field(default_factory=ReputationSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def from_yaml(cls, config_path: str) -> "Settings":
        """Load settings from YAML file."""
        config_file = Path(config_path)
        if config_file.exists():
            with open(config_file, 'r') as f:
                config_data = yaml.safe_load(f) or {}
            return cls(**config_data)
        return cls()

    def to_yaml(self, config_path: str) -> None:
        """Save settings to YAML file."""
        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w') as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, default_flow_style=False, indent=2)


# Global settings instance
settings = Settings()
