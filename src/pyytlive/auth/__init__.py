"""OAuth2 authorization for the YouTube Data API."""

from pyytlive.auth.flow import AuthorizationEnvironment, YouTubeAuthorization

__all__ = ["AuthorizationEnvironment", "YouTubeAuthorization"]
