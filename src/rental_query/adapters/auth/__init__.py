"""Auth adapter – header providers."""
from rental_query.adapters.auth.headers import AuthHeaderProvider, BearerTokenAuth, NoAuth

__all__ = ["AuthHeaderProvider", "BearerTokenAuth", "NoAuth"]
