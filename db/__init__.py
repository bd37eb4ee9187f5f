"""
db/ - Database Layer
====================
MySQL access: statement building, execution with bound parameters,
result shaping and information_schema introspection.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
