"""Google infrastructure package — Gmail OAuth2 and REST access."""

from .gmail_gateway import GmailGateway, GmailOAuthConfig, GmailSession

__all__ = ["GmailGateway", "GmailOAuthConfig", "GmailSession"]
