"""Command line runner: job file models and the ``cartonplan`` entry point."""
