"""Configuration for the access-control engine.

Pydantic-validated settings shared by the resolver, guards and navigation
filter. Embedding applications build an AccessConfig directly or call
load_access_config_from_env(); only EnforcementMode.from_env() in
guards/interceptors.py also reads os.environ.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from .permissions.constants import ADMIN_ROLE_NAME


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AccessConfig(BaseModel):
    """Settings for authorization resolution and guard behaviour.

    Environment variables (see load_access_config_from_env):
        LOG_LEVEL                   — logging level
        LOG_JSON                    — JSON log output
        ACCESS_ADMIN_ROLE           — role name that grants the admin bypass
        ACCESS_OPERATIONAL_ROLES    — comma-separated navigation bypass roles
        ACCESS_MODULE_REDIRECT      — route guard target for disabled modules
        ACCESS_PERMISSION_REDIRECT  — route guard target for missing access
        ACCESS_SUPER_ADMIN_REDIRECT — route guard target for non super admins
        ACCESS_FETCH_TIMEOUT        — directory fetch timeout in seconds
        ACCESS_NAV_MODULE_FALLBACK  — module-only nav items need a module permission
    """

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Roles
    admin_role_name: str = Field(
        default=ADMIN_ROLE_NAME,
        description="Role name whose holders bypass role and permission checks",
    )
    operational_roles: list[str] = Field(
        default_factory=list,
        description="Role names that see every module-enabled navigation item",
    )

    # Route guard targets
    module_redirect: str = Field(
        default="/module-disabled",
        description="Redirect path when a required module is disabled",
    )
    permission_redirect: str = Field(
        default="/unauthorized",
        description="Redirect path when role or permission checks fail",
    )
    super_admin_redirect: str = Field(
        default="/dashboard",
        description="Redirect path when a platform super-admin check fails",
    )

    # Resolution
    fetch_timeout_s: float = Field(
        default=10.0,
        description="Upper bound for one snapshot resolution; exceeding it fails closed",
    )

    # Navigation
    nav_require_module_permission: bool = Field(
        default=False,
        description="Module-only nav items require at least one permission in that module",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    @field_validator("admin_role_name")
    @classmethod
    def validate_admin_role_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("admin_role_name must not be empty")
        return v

    @field_validator("operational_roles", mode="before")
    @classmethod
    def validate_operational_roles(cls, v: str | list[str] | None) -> list[str]:
        """Accept a comma-separated string or a list; drop blanks."""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [name.strip() for name in v if name and name.strip()]

    @field_validator("module_redirect", "permission_redirect", "super_admin_redirect")
    @classmethod
    def validate_redirect(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"Redirect path must start with '/': {v!r}")
        return v

    @field_validator("fetch_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("fetch_timeout_s must be positive")
        return v

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


def load_access_config_from_env() -> AccessConfig:
    """Load access configuration from environment variables.

    This is the ONLY place where os.getenv is used for engine settings.

    Returns:
        AccessConfig instance with values from environment or defaults.
    """
    import os

    _TRUTHY = ("true", "1", "yes", "on")

    return AccessConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in _TRUTHY,
        admin_role_name=os.getenv("ACCESS_ADMIN_ROLE", ADMIN_ROLE_NAME),
        operational_roles=os.getenv("ACCESS_OPERATIONAL_ROLES", ""),
        module_redirect=os.getenv("ACCESS_MODULE_REDIRECT", "/module-disabled"),
        permission_redirect=os.getenv("ACCESS_PERMISSION_REDIRECT", "/unauthorized"),
        super_admin_redirect=os.getenv("ACCESS_SUPER_ADMIN_REDIRECT", "/dashboard"),
        fetch_timeout_s=os.getenv("ACCESS_FETCH_TIMEOUT", "10"),
        nav_require_module_permission=os.getenv("ACCESS_NAV_MODULE_FALLBACK", "false").lower() in _TRUTHY,
    )


__all__ = [
    "AccessConfig",
    "LogLevel",
    "load_access_config_from_env",
]
