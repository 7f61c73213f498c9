"""
Service layer abstraction.

Each service encapsulates business logic for a domain.  Services are
plain objects built per application by ``registry.build_services`` and
receive their storage as a ``Repository``, so API handlers never
touch storage directly.
"""
