"""people/ -- Person records and their SQLAlchemy-backed store.

Layer rule: people/ imports only core/, stdlib and third-party libraries.
"""
