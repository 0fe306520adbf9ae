"""Notifications module - In-app messages for applicants and staff."""
