"""
capordino.commands - CLI command implementations
"""

__all__ = [
    "config_cmd",
    "convert",
    "frameworks",
]
