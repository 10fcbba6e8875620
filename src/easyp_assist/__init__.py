"""Context-aware completion and validation for easyp.yaml configuration files."""

__version__ = "0.3.0"
