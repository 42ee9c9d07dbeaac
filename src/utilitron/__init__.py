"""Utilitron: helpers for loading, composing and minifying SQL query resources."""
