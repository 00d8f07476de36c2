"""Resource tree SQL query constants.

All queries are parameterized by schema. Mutating queries are executed
inside a serializable transaction by the asyncpg repositories.
"""

# Group CRUD queries
GROUP_INSERT = """
    INSERT INTO {schema}.groups (
        name, path, parent_id, traversal_ids, description, visibility_level,
        created_by, updated_by, created_at, updated_at
    ) VALUES ($1, $2, $3, '', $4, $5, $6, $7, $8, $8)
    RETURNING id
"""

GROUP_SET_TRAVERSAL_IDS = """
    UPDATE {schema}.groups SET traversal_ids = $2
    WHERE id = $1
    RETURNING *
"""

GROUP_UPDATE_BASIC = """
    UPDATE {schema}.groups SET
        name = $2,
        path = $3,
        description = $4,
        visibility_level = $5,
        updated_by = $6,
        updated_at = $7
    WHERE id = $1
    RETURNING *
"""

GROUP_DELETE = """
    DELETE FROM {schema}.groups
    WHERE id = $1
"""

GROUP_MEMBERS_DELETE = """
    DELETE FROM {schema}.members
    WHERE resource_type = 'groups' AND resource_id = $1
"""

GROUP_OWNER_INSERT = """
    INSERT INTO {schema}.members (
        resource_type, resource_id, role, member_type, member_name_id,
        granted_by, created_by, created_at, updated_at
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $8)
"""

# Locking reads
GROUP_GET_BY_ID_FOR_UPDATE = """
    SELECT * FROM {schema}.groups
    WHERE id = $1
    FOR UPDATE
"""

GROUP_SIBLINGS_FOR_UPDATE = """
    SELECT id, name, path FROM {schema}.groups
    WHERE parent_id = $1
    FOR UPDATE
"""

# Transfer: move the group, then re-derive the subtree from parent pointers
GROUP_UPDATE_PARENT = """
    UPDATE {schema}.groups SET
        parent_id = $2,
        updated_by = $3,
        updated_at = $4
    WHERE id = $1
"""

GROUP_REBUILD_SUBTREE_TRAVERSAL_IDS = """
    WITH RECURSIVE subtree AS (
        SELECT id, $2::text AS traversal_ids
        FROM {schema}.groups
        WHERE id = $1
        UNION ALL
        SELECT g.id, subtree.traversal_ids || ',' || g.id::text
        FROM {schema}.groups g
        JOIN subtree ON g.parent_id = subtree.id
    )
    UPDATE {schema}.groups AS t
    SET traversal_ids = subtree.traversal_ids
    FROM subtree
    WHERE t.id = subtree.id
"""

# Group retrieval queries
GROUP_GET_BY_ID = """
    SELECT * FROM {schema}.groups
    WHERE id = $1
"""

GROUP_GET_BY_IDS = """
    SELECT * FROM {schema}.groups
    WHERE id = ANY($1::bigint[])
"""

GROUP_GET_BY_PATHS = """
    SELECT * FROM {schema}.groups
    WHERE path = ANY($1::text[])
"""

GROUP_GET_CHILD_BY_PATH = """
    SELECT * FROM {schema}.groups
    WHERE parent_id = $1 AND path = $2
"""

GROUP_GET_BY_NAME_OR_PATH_UNDER_PARENT = """
    SELECT * FROM {schema}.groups
    WHERE parent_id = $1 AND (name = $2 OR path = $3)
"""

GROUP_GET_BY_NAME_FUZZILY = """
    SELECT * FROM {schema}.groups
    WHERE name ILIKE '%' || $1 || '%'
"""

GROUP_GET_BY_ID_NAME_FUZZILY = """
    SELECT * FROM {schema}.groups
    WHERE (traversal_ids LIKE $1 || ',%' OR traversal_ids LIKE '%,' || $1 || ',%')
      AND name ILIKE '%' || $2 || '%'
"""

GROUP_GET_SUBGROUPS_UNDER_PARENT_IDS = """
    SELECT * FROM {schema}.groups
    WHERE parent_id = ANY($1::bigint[])
"""

GROUP_COUNT_BY_PARENT_ID = """
    SELECT COUNT(*) FROM {schema}.groups
    WHERE parent_id = $1
"""

GROUP_LIST_SUBGROUPS = """
    SELECT * FROM {schema}.groups
    WHERE parent_id = $1
    ORDER BY updated_at DESC, id DESC
    OFFSET $2 LIMIT $3
"""

GROUP_LIST_CHILDREN = """
    SELECT * FROM (
        SELECT id, name, path, 'group' AS type, parent_id, traversal_ids,
               description, visibility_level, updated_at, 0 AS kind
        FROM {schema}.groups
        WHERE parent_id = $1
        UNION ALL
        SELECT id, name, name AS path, 'application' AS type, group_id AS parent_id, '' AS traversal_ids,
               description, '' AS visibility_level, updated_at, 1 AS kind
        FROM {schema}.applications
        WHERE group_id = $1
    ) AS children
    ORDER BY kind, updated_at DESC, id DESC
    OFFSET $2 LIMIT $3
"""

GROUP_COUNT_CHILDREN = """
    SELECT
        (SELECT COUNT(*) FROM {schema}.groups WHERE parent_id = $1)
      + (SELECT COUNT(*) FROM {schema}.applications WHERE group_id = $1)
"""

GROUP_HAS_CHILDREN = """
    SELECT EXISTS(SELECT 1 FROM {schema}.groups WHERE parent_id = $1)
        OR EXISTS(SELECT 1 FROM {schema}.applications WHERE group_id = $1)
        OR EXISTS(SELECT 1 FROM {schema}.templates WHERE group_id = $1)
"""

# Leaf resource queries
APPLICATION_GET_BY_ID = """
    SELECT * FROM {schema}.applications
    WHERE id = $1
"""

APPLICATIONS_GET_BY_NAMES_UNDER_GROUP = """
    SELECT * FROM {schema}.applications
    WHERE group_id = $1 AND name = ANY($2::text[])
"""

APPLICATION_GET_BY_NAME_UNDER_GROUP = """
    SELECT * FROM {schema}.applications
    WHERE group_id = $1 AND name = $2
"""

APPLICATIONS_GET_BY_NAME_FUZZILY = """
    SELECT * FROM {schema}.applications
    WHERE name ILIKE '%' || $1 || '%'
"""

APPLICATIONS_COUNT_BY_GROUP = """
    SELECT COUNT(*) FROM {schema}.applications
    WHERE group_id = $1
"""

CLUSTER_GET_BY_ID = """
    SELECT * FROM {schema}.clusters
    WHERE id = $1
"""

CLUSTER_GET_BY_NAME_UNDER_APPLICATION = """
    SELECT * FROM {schema}.clusters
    WHERE application_id = $1 AND name = $2
"""

TEMPLATE_GET_BY_ID = """
    SELECT * FROM {schema}.templates
    WHERE id = $1
"""

TEMPLATES_COUNT_BY_GROUP = """
    SELECT COUNT(*) FROM {schema}.templates
    WHERE group_id = $1
"""

PIPELINERUN_GET_BY_ID = """
    SELECT * FROM {schema}.pipelineruns
    WHERE id = $1
"""
