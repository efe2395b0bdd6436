"""
Service layer abstraction.

Each service encapsulates the platform queries for a domain.  API
handlers call service classmethods and never talk to Supabase
directly, so the query details can change without touching routes.
"""
