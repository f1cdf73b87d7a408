"""HTTP route handlers for the logcap server."""
