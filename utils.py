"""
General utility functions for the CLI application.
"""

from rich.console import Console

console: Console = Console()


def debug(
    *values: object,
    sep: str = " ",
    end: str = "\n",
) -> None:
    """
    Print a debug message with orange formatting.

    Used by the `--verbose` flag to trace how each file was classified.

    Args:
        *values: Objects to print. All values are converted to strings.
        sep: Separator string between values. Defaults to a single space.
        end: String appended after the last value. Defaults to newline.
    """
    if not values:
        console.print(end=end)
        return

    message = sep.join(str(v) for v in values)
    console.print(f"DEBUG: {message}", end=end, style="orange1")
