"""MySetlist - concert setlist tracking with catalog-backed song search."""

__version__ = "0.1.0"
