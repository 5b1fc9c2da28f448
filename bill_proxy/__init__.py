"""BOHECO2 bill-inquiry proxy.

Forwards bill lookups from the frontend to the upstream inquiry API while
keeping a session cookie alive and answering CORS preflights.
"""

__version__ = "1.0.0"
