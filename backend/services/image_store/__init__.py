"""Image Store: slide images and thumbnails on the local filesystem, served under /uploads."""

__version__ = "1.0.0"
