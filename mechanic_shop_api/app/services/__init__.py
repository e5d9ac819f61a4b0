"""
Service layer abstraction.

Each service encapsulates business logic for a domain.  Services take
the database connection as their first argument; every write runs
inside ``core.db.transaction`` so that a failed operation leaves no
partial state behind.
"""
