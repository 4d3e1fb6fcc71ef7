"""
Exceptions raised by the tdgrid agent.

Both subclass ValueError, so callers that already guard grid and policy
construction with ``except ValueError`` keep working.
"""


class ConfigurationError(ValueError):
    """Raised when an agent is constructed with an invalid configuration."""


class InvalidActionError(ValueError):
    """Raised when an action outside the configured action set is referenced."""
    
    def __init__(self, action, actions) -> None:
        self.action = action
        self.actions = tuple(actions)
        super().__init__(
            f"Invalid action {action!r}. Must be one of: {list(self.actions)}"
        )
