"""
Snapshot aggregation, subscriber management and scheduling.
"""
# Modules import their collaborators directly to avoid circular imports
# through the package namespace.
