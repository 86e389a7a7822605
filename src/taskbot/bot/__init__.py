"""
Command handling.

Components:
- router.py: parses slash-commands, calls the task store, builds replies/notifications
- formatting.py: every user-facing text (lists, confirmations, error messages)
"""
