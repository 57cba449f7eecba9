"""
systour CLI command implementations.

Each module exposes register_parsers(subparsers) and cmd_* handlers that
return JSON-ready dicts.
"""
