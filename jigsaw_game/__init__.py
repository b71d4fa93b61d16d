"""Interactive jigsaw puzzle: piece registry, drag/snap controller and session tracking."""
