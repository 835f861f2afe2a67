"""runshell: pick a shell, inject integration hooks, keep the terminal sane."""

__version__ = "0.1.0"
