"""
Food center lookup.

Responsibilities:
- Turn optional search parameters into a single filter predicate.
- Run that predicate against the record store for both listing and counting.
- Derive flat longitude/latitude fields from a record's location on write.
"""
