"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskSnapshot, Identity, TaskResult, TaskError)
- task_store.py: in-memory thread-safe storage with atomic create/assign/unassign/resolve
"""
