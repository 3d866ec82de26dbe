"""ocget — fetch and symlink OpenShift client tooling."""

__version__ = "0.1.0"
