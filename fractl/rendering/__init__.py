"""Color mapping and image export."""
