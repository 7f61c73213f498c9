"""
Version 1 of the API.

This subpackage bundles all endpoints of the FitCoach Pro API.  They
are mounted below ``settings.api_prefix`` (``/api`` by default).
"""
