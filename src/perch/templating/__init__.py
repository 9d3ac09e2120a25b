"""Kida integration — environment setup, built-in globals, document layouts."""
