"""Devtul results application."""
