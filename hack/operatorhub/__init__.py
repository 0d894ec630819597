"""Generate Operator Lifecycle Manager bundles for the ECK operator."""

__version__ = "0.2.0"
