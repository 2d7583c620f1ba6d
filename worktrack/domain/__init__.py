"""Domain records, repository contracts and health models.

Nothing in this package knows which data access technology is in use.
"""
