"""testgen CLI commands - subcommand implementations, loaded lazily."""
