"""CLI command implementations for the slotting application.

- validate: Validate a warehouse configuration file
"""

from slotting.cli.commands.validate import display_load_error, validate_command

__all__ = ["display_load_error", "validate_command"]
