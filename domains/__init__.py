"""Domain modules for Caffeine Reminder."""
