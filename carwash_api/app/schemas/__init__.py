"""
Record schemas and API payload models.

Each record type defines its enumerations, the table of validation
rules applied to submissions and the pydantic model used to return it.
Schemas are separated from storage to decouple API representation from
persistence.
"""
