"""Command-line interface (``agencydesk``)."""
