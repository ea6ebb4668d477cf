"""
Infrastructure Module

Redis adapters for the backend and lock protocols.
"""
