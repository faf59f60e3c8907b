"""Domain modules for the Meal Reminders service."""
