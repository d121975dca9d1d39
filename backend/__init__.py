"""Devtul results backend."""
