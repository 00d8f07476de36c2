"""Role binding SQL query constants (parameterized by schema)."""

MEMBER_INSERT = """
    INSERT INTO {schema}.members (
        resource_type, resource_id, role, member_type, member_name_id,
        granted_by, created_by, created_at, updated_at
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $8)
    RETURNING *
"""

MEMBER_GET_BY_ID = """
    SELECT * FROM {schema}.members
    WHERE id = $1
"""

MEMBER_GET_DIRECT = """
    SELECT * FROM {schema}.members
    WHERE resource_type = $1 AND resource_id = $2
      AND member_type = $3 AND member_name_id = $4
"""

MEMBER_UPDATE_ROLE = """
    UPDATE {schema}.members SET
        role = $2,
        granted_by = $3,
        updated_at = $4
    WHERE id = $1
    RETURNING *
"""

MEMBER_DELETE = """
    DELETE FROM {schema}.members
    WHERE id = $1
"""

MEMBER_LIST_DIRECT_BY_RESOURCE = """
    SELECT * FROM {schema}.members
    WHERE resource_type = $1 AND resource_id = $2
    ORDER BY created_at, id
"""
