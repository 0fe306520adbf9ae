"""Authentication module - Registration, login and the current user."""
