"""Weekly workout tracker API."""
