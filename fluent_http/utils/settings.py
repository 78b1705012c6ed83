"""
fluent_http/utils/settings.py

WHAT THIS FILE IS FOR
---------------------
This module defines the *single source of truth* for library-wide
transport defaults used by HttpClient.

It is responsible for:
- Defining all supported configuration fields (via Pydantic BaseSettings)
- Loading default values from parameters/parameters.yaml
- Overriding defaults with environment variables (FLUENT_HTTP_*)
- Exposing a cached, fully-validated Settings object

Per-request values set on a RequestBuilder (timeout, retries, proxy, ...)
always win over these defaults. Settings only fill in what a request
leaves unset.

LOAD & PRECEDENCE MODEL
-----------------------
Configuration is loaded in the following order (last wins):

1) YAML defaults from:
       parameters/parameters.yaml
2) Environment variables:
       FLUENT_HTTP_*

WHAT THIS FILE IS NOT FOR
-------------------------
This module is NOT responsible for:
- Sending requests
- Per-request options (see schemas/transport_options.py)
- Header or body construction
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)

PARAMETERS_PATH = Path(__file__).resolve().parents[2] / "parameters" / "parameters.yaml"


class Settings(BaseSettings):
    """
    Library-wide transport defaults.

    Load order / precedence:
        1) YAML defaults (parameters/parameters.yaml)
        2) Environment variables (FLUENT_HTTP_*), overriding YAML
    """

    model_config = SettingsConfigDict(
        env_prefix="FLUENT_HTTP_",
        extra="ignore",
    )

    # Transport defaults
    # - follow_redirects is off: a plain request reports the 3xx it got
    default_timeout_seconds: float = Field(default=30.0, gt=0)
    verify_tls: bool = True
    follow_redirects: bool = False
    max_retries: int = Field(default=0, ge=0)
    proxy: Optional[str] = None

    # Dry-run requests (RequestBuilder.simulate_request)
    simulated_status_code: int = Field(default=204, ge=100, le=599)


@lru_cache(maxsize=1)
def _load_yaml_parameters() -> Dict[str, Any]:
    """
    Load base configuration from parameters/parameters.yaml.

    Cached to:
    - Avoid repeated disk I/O
    - Guarantee consistent config during process lifetime
    """
    if not PARAMETERS_PATH.exists():
        logger.warning("parameters_yaml_missing", expected=str(PARAMETERS_PATH))
        return {}

    try:
        with PARAMETERS_PATH.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            logger.warning(
                "parameters_yaml_not_dict",
                path=str(PARAMETERS_PATH),
                type=type(data).__name__,
            )
            return {}
        logger.info("parameters_yaml_loaded", path=str(PARAMETERS_PATH))
        return data
    except Exception as exc:  # noqa: BLE001
        logger.error("parameters_yaml_load_error", path=str(PARAMETERS_PATH), error=str(exc))
        return {}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Construct and return the final validated Settings object.

    This function is:
    - Cached (singleton per process)
    - The supported way to obtain process-wide defaults

    HttpClient calls this when no explicit Settings are passed in.
    """
    # 1) YAML defaults
    yaml_data = _load_yaml_parameters()

    # 2) env overrides (partial)
    try:
        env_settings = Settings()
        env_data = env_settings.model_dump(exclude_unset=True)
        logger.info("settings_loaded_env_only_partial", fields=list(env_data.keys()))
    except ValidationError as exc:
        logger.warning("settings_env_validation_error", errors=exc.errors())
        env_data = {}

    # 3) merge + final validation
    merged: Dict[str, Any] = {**yaml_data, **env_data}
    settings = Settings.model_validate(merged)

    logger.info(
        "settings_loaded",
        default_timeout_seconds=settings.default_timeout_seconds,
        verify_tls=settings.verify_tls,
        follow_redirects=settings.follow_redirects,
        max_retries=settings.max_retries,
        has_proxy=settings.proxy is not None,
        simulated_status_code=settings.simulated_status_code,
    )

    return settings
