"""HTTP API for the identity package."""

from flag_identity.presentation.api.app import create_app

__all__ = ["create_app"]
