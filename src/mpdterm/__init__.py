"""mpdterm - startup configuration for a terminal MPD client.

Resolves defaults, configuration files, environment variables and command-line
flags into a single EffectiveConfig before the client starts.
"""

__version__ = "0.9.0"
