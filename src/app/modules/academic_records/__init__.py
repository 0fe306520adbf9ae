"""Academic records module - Subject grades attached to applications."""
