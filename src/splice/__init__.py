"""Forked genesis assembly.

This module selects which live storage survives the fork and splices it,
together with fixed overrides and the runtime code, into a template spec.
"""
