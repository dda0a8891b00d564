"""
MentorLink Infrastructure Layer

Persistence adapters, token verification, metrics and error tracking.
Storage is reached only through the SessionStore interface.
"""
