"""scopeflat: flatten a selected set of project files into one context document."""

__version__ = "0.1.0"


class ScopeflatError(Exception):
    """User-facing CLI error.

    Raised for a missing or unreadable rule file, an invalid working
    directory, and other input errors the user can fix. The message is
    printed to stderr and the process exits with code 1.
    """
