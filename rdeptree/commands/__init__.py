"""CLI subcommands for rdeptree."""
