"""Client projection package for the public configuration payload."""

from .client import ClientProjection, projection_build_client, projection_to_dict, projection_to_json

__all__ = ["ClientProjection", "projection_build_client", "projection_to_dict", "projection_to_json"]
