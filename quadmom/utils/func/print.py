# -*- coding: utf-8 -*-
"""
Console reporting for long harness runs.
"""
import sys
import time

COLORS = {
    "red": "\033[91m",
    "green": "\033[92m",
    "yellow": "\033[93m",
    "blue": "\033[94m",
    "magenta": "\033[95m",
    "cyan": "\033[96m",
    "white": "\033[97m",
    "reset": "\033[0m"
}

# Default color per message title
TITLE_COLORS = {
    "INFO": "cyan",
    "WARNING": "yellow",
    "ERROR": "red",
    "DONE": "green",
}


def print_highlighted(message, title=None, color=None, separator=True, timestamp=True,
                      width=80, stream=None):
    """
    Print a highlighted message with optional title, timestamp and separator.

    Parameters:
        message (str): The message to print.
        title (str, optional): Title for the message ("INFO", "WARNING", ...).
        color (str, optional): Color name; defaults to the title's color, else yellow.
        separator (bool, optional): Whether to print a separator line before the message.
        timestamp (bool, optional): Whether to include a timestamp.
        width (int, optional): The width of the separator line.
        stream (file, optional): Output stream, ``sys.stdout`` by default.
    """
    if color is None:
        color = TITLE_COLORS.get((title or "").upper(), "yellow")
    color_code = COLORS.get(color.lower(), COLORS["yellow"])

    output = ""
    if separator:
        output += "=" * width + "\n"
    if timestamp:
        output += time.strftime("[%Y-%m-%d %H:%M:%S]") + " "
    if title:
        output += f"[{title.upper()}] "
    output += f"{color_code}{message}{COLORS['reset']}"

    print(output, file=stream if stream is not None else sys.stdout)
