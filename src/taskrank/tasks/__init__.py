"""
Task subsystem.

Components:
- task_models.py: Priority value type and the Task entity
- preset_models.py: Preset and PresetTask entities
- connection.py: SQLite connection providers (file-backed, in-memory)
- task_store.py: SQLite-backed storage, ordering and preset injection
- task_api.py: small read-modify-persist helpers used by the console
"""
