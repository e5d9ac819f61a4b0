"""
Application package initializer.

The shop's domains (customers, mechanics, cars, service requests and
reports) each have a schema module, a service module holding the
business logic, and a router defined in ``api/v1/endpoints``.  The
service layer receives an explicit SQLite connection for every call so
that the same logic can be driven by the HTTP API, scripts or tests.
"""

from .main import app  # noqa: F401
