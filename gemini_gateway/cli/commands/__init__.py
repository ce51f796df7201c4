"""gemgate subcommands."""
