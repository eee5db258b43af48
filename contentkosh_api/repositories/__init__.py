"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries for each domain area. They only
flush; committing is left to the services, which share the request session
provided by contentkosh_api.db.session.get_async_session.
"""
