"""Version information."""

__version__ = "0.1.0"
__version_info__ = (0, 1, 0)

# Version history
CHANGELOG = """
# Changelog

## v0.1.0

**Query dependency graph**

- Table discovery for base tables, CTEs and aliased derived subqueries
- Column lineage for projected expressions
- Topological evaluation order with cycle detection
- Multi-statement scripts share one result sentinel

**CLI**

- pretty / table / json reports
- --depends-on query
- --strict mode

### Known Limitations

- CASE, CAST, unary operators and window clauses contribute no column dependencies
- Set operations (UNION, INTERSECT, EXCEPT) produce no lineage
- SELECT * is not expanded into concrete columns
"""
