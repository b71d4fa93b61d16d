"""Domain and API data models."""

from .piece import Piece, PlacementState

__all__ = ["Piece", "PlacementState"]
