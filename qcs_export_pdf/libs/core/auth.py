"""
Authentication Module

Handles API key authentication against the Qlik Cloud tenant.
"""

from typing import Dict

from requests.auth import AuthBase

from .constants import NetworkConstants
from .exceptions import AuthenticationError


class ApiKeyAuth(AuthBase):
    """Attaches the tenant API key as a bearer token to every request"""

    def __init__(self, api_key: str):
        """
        Initialize API key authentication

        Args:
            api_key: API key generated for the tenant

        Raises:
            AuthenticationError: If no API key is given
        """
        if not api_key:
            raise AuthenticationError("An API key is required to authenticate with the tenant")
        self.api_key = api_key

    def get_auth_headers(self) -> Dict[str, str]:
        """
        Get authentication headers for HTTP requests

        Returns:
            Dict containing authorization headers
        """
        return {str(NetworkConstants.HTTPHeader.AUTHORIZATION): f'Bearer {self.api_key}'}

    def __call__(self, request):
        request.headers.update(self.get_auth_headers())
        return request

    def __repr__(self) -> str:
        return "ApiKeyAuth(api_key='***MASKED***')"
