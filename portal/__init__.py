"""District community portal: approval and role gated content lifecycle"""

__version__ = "0.1.0"
