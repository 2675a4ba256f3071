"""Command-line interface for cardview."""
