"""
Services module for UltraCare Backend.

Contains business logic and external service integrations.
"""
