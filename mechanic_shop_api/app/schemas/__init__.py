"""
Pydantic schema definitions for API payloads.

Each domain (customers, mechanics, cars, service requests, reports)
defines its own Pydantic models for request and response bodies.
Schemas only describe the shape of the data; range and format rules
are enforced by the service layer through ``core.validation``.
"""
