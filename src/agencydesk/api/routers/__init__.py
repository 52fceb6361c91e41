"""One router per backend function."""
