"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Subtask, Notification) + instant helpers
- priority.py: pure priority evaluator (category + due-date bucket)
- notifications.py: bounded newest-first notification log
- task_stats.py: statistics snapshot
- serializer.py: JSON / CSV export, JSON import decoding
- task_store.py: the TaskStore aggregate tying it all together
"""
