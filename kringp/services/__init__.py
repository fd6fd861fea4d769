"""Services Layer — async DB workflows shared by several routes.

Invariants:
    - Services add and flush; the calling route owns the commit
"""
