"""Admissions timeline backend application package."""
