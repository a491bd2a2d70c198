"""HTTP preview API."""
