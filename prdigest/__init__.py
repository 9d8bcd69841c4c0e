"""Daily digest of open pull requests across team repositories and authors."""

__version__ = "0.1.0"
