"""Version 1 of the appointment API."""
