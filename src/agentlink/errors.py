"""Errors raised to callers of agentlink.

Upload and download failures are not raised. They are carried as the ``err`` of the
operation state and delivered to subscribers.
"""


class AgentLinkError(Exception):
    """ Base class for agentlink errors. """


class UnsupportedOperationError(AgentLinkError):
    """ The host environment cannot perform the requested operation. """


class ConfigurationError(AgentLinkError):
    """ The configuration could not be loaded or applied. """
