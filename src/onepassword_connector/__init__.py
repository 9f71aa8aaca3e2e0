from .config import AuthType, ConnectorConfig, LogLevel, load_config_from_env
from .client import OnePasswordCli
from .exceptions import (
    CliError,
    ConfigurationError,
    ConnectorError,
    CursorError,
    InvalidEntitlementError,
    UnsupportedPrincipalError,
    ValidationError,
)
from .logging import (
    safe_preview,
    redact_secrets,
    safe_log_value,
    ConnectorFormatter,
    ConnectorLoggerAdapter,
    setup_logging,
    get_connector_logger,
)
from .pagination import PageState, PaginationBag
from .permissions import (
    AccountTier,
    Entitlements,
    directive_for,
    expand_for_grant,
    expand_for_revoke,
    format_directive,
)
from .connector import OnePasswordConnector, VaultSyncer, walk_vault_grants

__version__ = "0.1.0"

__all__ = [
    'AuthType',
    'ConnectorConfig',
    'LogLevel',
    'load_config_from_env',
    'OnePasswordCli',
    'CliError',
    'ConfigurationError',
    'ConnectorError',
    'CursorError',
    'InvalidEntitlementError',
    'UnsupportedPrincipalError',
    'ValidationError',
    'safe_preview',
    'redact_secrets',
    'safe_log_value',
    'ConnectorFormatter',
    'ConnectorLoggerAdapter',
    'setup_logging',
    'get_connector_logger',
    'PageState',
    'PaginationBag',
    'AccountTier',
    'Entitlements',
    'directive_for',
    'expand_for_grant',
    'expand_for_revoke',
    'format_directive',
    'OnePasswordConnector',
    'VaultSyncer',
    'walk_vault_grants',
]
