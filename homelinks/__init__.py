"""Link launcher dashboard backend: shared links plus per-user overlays in one JSON file."""
