"""
Applications module - Admission applications and the status transition engine.
"""
