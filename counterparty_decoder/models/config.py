"""Configuration management using Pydantic settings."""

from typing import Literal, Optional
from pydantic import Field
from pydantic_settings import BaseSettings

# Counterparty v9.60 changed the issuance layout at this height
ISSUANCE_FORMAT_CHANGE_HEIGHT = 753500


class DecoderConfig(BaseSettings):
    """Configuration for the Counterparty transaction decoder."""

    # Block explorer Settings
    blockcypher_base_url: str = Field(default="https://api.blockcypher.com/v1/btc/main",
                                      description="BlockCypher API base URL")
    blockcypher_token: Optional[str] = Field(default=None, description="Optional BlockCypher API token")
    request_timeout: int = Field(default=30, description="HTTP timeout in seconds")
    retry_attempts: int = Field(default=3, description="Retry attempts for failed requests")
    retry_delay: float = Field(default=1.0, description="Base delay between retries in seconds")
    rate_limit_delay: float = Field(default=0.5, description="Minimum delay between requests in seconds")
    tx_output_limit: int = Field(default=200, description="Max inputs/outputs requested per transaction")

    # Decoding Settings
    format_change_height: int = Field(default=ISSUANCE_FORMAT_CHANGE_HEIGHT,
                                      description="First block using the current issuance layout")
    rc4_key_encoding: Literal["ascii", "hex"] = Field(
        default="ascii",
        description="Use the outpoint hash as ASCII text (ascii) or as decoded bytes (hex)"
    )

    # Logging Settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format (json|text)")
    log_file: Optional[str] = Field(default=None, description="Log file path")
    log_max_size_mb: int = Field(default=10, description="Max log file size in MB")
    log_backup_count: int = Field(default=3, description="Number of log backups")

    class Config:
        env_prefix = "CP_DECODER_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def transaction_url_template(self) -> str:
        """URL of a single transaction lookup, with ``{tx_hash}`` placeholder."""
        return f"{self.blockcypher_base_url.rstrip('/')}/txs/{{tx_hash}}"
