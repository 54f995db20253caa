"""Credential providers that build auth headers for backend calls."""

from intelsearch.providers.auth.header_credential_provider import HeaderCredentialProvider

__all__ = ["HeaderCredentialProvider"]
