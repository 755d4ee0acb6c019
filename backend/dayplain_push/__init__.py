"""Web Push reminder server for the Dayplain habit and task tracker."""

__version__ = "0.1.0"
