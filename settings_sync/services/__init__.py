"""Service layer exports."""

from .authentication import AuthenticatedUser, AuthenticationGate
from .identity_store import IdentityStore
from .oauth_exchange import OAuthExchangeService
from .settings_store import SettingsRecord, SettingsStore, SettingsVersion

__all__ = [
    "AuthenticatedUser",
    "AuthenticationGate",
    "IdentityStore",
    "OAuthExchangeService",
    "SettingsRecord",
    "SettingsStore",
    "SettingsVersion",
]
