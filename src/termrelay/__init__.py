"""termrelay -- Interactive terminal front-end for a remote command executor.

This package turns a raw keystroke stream into a line-oriented command
interpreter with prefix tab completion, and relays committed commands
over a persistent, auto-reconnecting WebSocket to a remote executor.
Replies are rendered back into the terminal in a strict
output-then-prompt order.
"""

__version__ = "0.1.0"
