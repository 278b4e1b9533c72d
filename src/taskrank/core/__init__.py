"""Core contracts shared by storage and surface code: ports, errors, app state."""
