from .config import AccessConfig, LogLevel, load_access_config_from_env
from .decisions import (
    OPEN_REQUIREMENT,
    SUPER_ADMIN_REQUIREMENT,
    AccessDecision,
    AccessRequirement,
    DecisionOutcome,
    DenialReason,
)
from .evaluator import evaluate, is_allowed, require
from .exceptions import (
    AccessCoreError,
    AccessDeniedError,
    ConfigurationError,
    DirectoryStoreError,
    IdentityMissingError,
    ModuleToggleError,
)
from .guards import (
    ComponentGate,
    DenialContext,
    EnforcementMode,
    RequirementInterceptor,
    RouteGuard,
    RouteOutcome,
    RouteResult,
)
from .logging import (
    safe_preview,
    redact_secrets,
    safe_log_value,
    AccessLogFormatter,
    AccessLoggerAdapter,
    setup_logging,
    get_access_logger,
)
from .navigation import DEFAULT_NAVIGATION, NavItem, NavSection, filter_navigation
from .permissions import ADMIN_ROLE_NAME, Module, Permissions
from .resolver import PermissionResolver
from .snapshot import AuthorizationSnapshot
from .store import DirectoryStore, InMemoryDirectoryStore

__all__ = [
    'AccessConfig',
    'LogLevel',
    'load_access_config_from_env',
    'OPEN_REQUIREMENT',
    'SUPER_ADMIN_REQUIREMENT',
    'AccessDecision',
    'AccessRequirement',
    'DecisionOutcome',
    'DenialReason',
    'evaluate',
    'is_allowed',
    'require',
    'AccessCoreError',
    'AccessDeniedError',
    'ConfigurationError',
    'DirectoryStoreError',
    'IdentityMissingError',
    'ModuleToggleError',
    'ComponentGate',
    'DenialContext',
    'EnforcementMode',
    'RequirementInterceptor',
    'RouteGuard',
    'RouteOutcome',
    'RouteResult',
    'safe_preview',
    'redact_secrets',
    'safe_log_value',
    'AccessLogFormatter',
    'AccessLoggerAdapter',
    'setup_logging',
    'get_access_logger',
    'DEFAULT_NAVIGATION',
    'NavItem',
    'NavSection',
    'filter_navigation',
    'ADMIN_ROLE_NAME',
    'Module',
    'Permissions',
    'PermissionResolver',
    'AuthorizationSnapshot',
    'DirectoryStore',
    'InMemoryDirectoryStore',
]
