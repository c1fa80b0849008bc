"""Core building blocks shared by every feature (settings, errors, pagination)."""
