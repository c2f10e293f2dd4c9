"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskState)
- lifecycle.py: submit + poll loop with backoff (PollPolicy)
"""
