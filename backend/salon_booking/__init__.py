"""Salon reservation availability & capacity engine."""
