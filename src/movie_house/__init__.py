"""MovieHouse: a terminal search interface over the OMDb movie-metadata service."""

__version__ = "1.0.0"
