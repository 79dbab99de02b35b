"""Single-user task tracker: lifecycle state machine, queries and JSON persistence."""
