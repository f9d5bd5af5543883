"""
rental_query – client-side resource query and cache layer for the rental
marketplace API.

Import path convention::

    from rental_query.application.query.engine import ResourceQueryEngine
    from rental_query.application.filters import normalize
    from rental_query.adapters.http import HttpxTransport
    from rental_query.resources import PROPERTIES, PropertyClient
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
