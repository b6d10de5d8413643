"""Music catalog clients."""

from mysetlist.catalog.spotify import SpotifyCatalog

__all__ = ["SpotifyCatalog"]
