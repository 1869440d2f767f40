from .client import MetadataClient

__all__ = ["MetadataClient"]
