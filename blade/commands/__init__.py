"""
Command files shipped with blade.

Each module here is activated from source like any user plugin file and
registers its commands through `register_commands(registry)`.
"""
