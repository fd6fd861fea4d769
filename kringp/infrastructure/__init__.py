"""Infrastructure Layer — database sessions, security, logging and outbound clients.

Invariants:
    - Every outbound failure (push, payment, mail) surfaces as ExternalServiceError
    - Outbound clients are FastAPI dependencies so tests can swap them
"""
