"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, Priority) and date helpers
- task_errors.py: error taxonomy (ValidationError, InvalidState, NotFound, ...)
- task_lifecycle.py: per-status state objects (advance / edit / delete rules)
- task_query.py: sort orders and filter/search criteria
- task_store.py: in-memory collection with id assignment and queries
- task_codec.py: JSON file persistence with per-record validation
- task_api.py: token parsing and rendering helpers used by the console
"""
