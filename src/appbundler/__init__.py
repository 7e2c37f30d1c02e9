"""macOS application bundler for Java projects."""

__version__ = "1.0.0"
