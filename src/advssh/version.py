"""Version information for advssh."""

VERSION = "0.1.0"
