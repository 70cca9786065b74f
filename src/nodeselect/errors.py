"""User-facing exceptions raised by nodeselect commands."""


class NodeSelectError(Exception):
    """Base exception for nodeselect."""
    pass


class NoContextError(NodeSelectError):
    """The command needs a current note but none is active."""
    pass


class EmptyResultError(NodeSelectError):
    """A lookup (backlinks, forward links) found nothing to select."""
    pass


class SelectionAborted(NodeSelectError):
    """The user cancelled the prompt."""
    pass


class SearchError(NodeSelectError):
    """The text search backend could not be run."""
    pass


class ConfigError(NodeSelectError):
    """Bad configuration value or unresolvable entry point."""
    pass
