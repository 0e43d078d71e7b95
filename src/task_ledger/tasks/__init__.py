"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus) and day/priority helpers
- task_errors.py: registry failures (InvalidPriority, InvalidIndex, NotOwner, TaskDeleted, InvalidDueDate)
- task_store.py: SQLite-backed and in-memory record sequence + owner index
- task_registry.py: ownership, soft delete and "today" rules on top of a store
"""
