"""
Clients for third-party identity providers.
"""

from homeswift.integrations.google import GoogleOAuthClient, GoogleOAuthError

__all__ = ["GoogleOAuthClient", "GoogleOAuthError"]
