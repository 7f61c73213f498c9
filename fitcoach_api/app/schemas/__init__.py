"""
Pydantic schema definitions for stored records and API payloads.

Each domain (users, coaches, clients, workouts, devices) defines its
own models.  Field names are snake_case in Python and camelCase on the
wire (see ``common.ApiModel``).
"""
