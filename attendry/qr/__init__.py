"""QR token issue and validation."""
