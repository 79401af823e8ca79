"""
Actor-facing message catalog and notifier.
"""
