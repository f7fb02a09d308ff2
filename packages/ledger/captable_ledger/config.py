"""Configuration management.

Loads from an optional TOML file + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import Field
from pydantic_settings import BaseSettings


class LedgerSettings(BaseSettings):
    """Settings shared by the batch compiler and the payment context builder."""

    # Aggregate (cap table) resource
    aggregate_kind: str = Field(
        default="Fairmint.OpenCapTable.CapTable:CapTable",
        description="Kind tag of the capitalization record resource on the ledger",
    )
    update_choice: str = Field(
        default="UpdateCapTable",
        description="Choice exercised on the aggregate to apply a batch",
    )
    command_id_prefix: str = "update-captable"

    warn_on_deprecated_fields: bool = True

    # Payments
    max_value_inputs: Optional[int] = Field(
        default=None,
        ge=1,
        description="Upper bound on value resources consumed by one payment (None = no cap)",
    )
    pricing_rules_key: str = "amulet_rules"
    open_round_key: str = "open_mining_round"
    fee_share_right_key: str = "featured_app_right"

    model_config = {"env_prefix": "CAPTABLE_LEDGER_"}


def load_settings(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> LedgerSettings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional, ignored if missing).
        overrides: Dict of overrides to apply on top of the file contents.

    Returns:
        Validated LedgerSettings
    """
    data: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)
            # Allow the settings to live under a [captable_ledger] table
            data = data.get("captable_ledger", data)

    if overrides:
        data.update(overrides)

    return LedgerSettings(**data)
