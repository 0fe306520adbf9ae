"""Applicant profiles module - Personal and guardian details of applicants."""
