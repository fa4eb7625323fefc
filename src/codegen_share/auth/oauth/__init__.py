"""Federated login through Google OAuth."""

from codegen_share.auth.oauth.google import GoogleOAuthClient


__all__ = ["GoogleOAuthClient"]
