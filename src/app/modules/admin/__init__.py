"""Admin module - Dashboard, reporting and staff account management."""
