"""
Rule persistence.

The rule table is stored as a versioned JSON document; see json_store for
the schema, the migrations and the default table.
"""
