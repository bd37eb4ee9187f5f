"""
repositories/ - Data Access Layer
==================================
Each repository wraps the stored procedures and queries for one domain area.
Rows are returned exactly as the database produces them.
"""
