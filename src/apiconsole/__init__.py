"""apiconsole: call API operations by typing `service verb arg name=value`."""

__version__ = "0.1.0"
