"""bloatctl - catalog-guided removal of pre-installed Android packages."""

__version__ = "0.1.0"
