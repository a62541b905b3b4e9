"""Transient storage layer.

This package holds the replay buffer that keeps a drained upload on
disk until its sink has consumed it.
"""
