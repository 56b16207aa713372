"""weblist: sandboxed file-browsing HTTP service."""

__version__ = "0.1.0"
