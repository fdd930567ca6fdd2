"""Default PostgreSQL queries, one per sync profile.

Every query returns a subset of :data:`SOURCE_COLUMNS` and may reference the
``:active_only`` bind parameter. Test and example accounts are excluded here so
the engine can treat every returned row as a legitimate candidate.
"""

from __future__ import annotations

from typing import Final

SOURCE_COLUMNS: Final[tuple[str, ...]] = (
    "id",
    "name",
    "email",
    "phone",
    "active",
    "created_at",
    "updated_at",
    "tenant_id",
    "hire_date",
    "license_number",
    "license_expiry",
    "license_type",
    "role",
    "department",
)

_EMPLOYEE_BASE = """
    SELECT
        emp.id,
        emp.first_name || ' ' || emp.last_name AS name,
        e.address AS email,
        emp.mobile_phone AS phone,
        emp.active,
        emp.created_at,
        emp.updated_at,
        emp.tenant_id,
        emp.hire_date
    FROM employees emp
    LEFT JOIN emails e
        ON e.emailable_id = emp.id
        AND e.emailable_type = 'Employee'
        AND e."primary" = true
    WHERE (:active_only = false OR emp.active = true)
        AND COALESCE(e.address, '') NOT LIKE '%test%'
        AND COALESCE(e.address, '') NOT LIKE '%example%'
    ORDER BY emp.id
"""

_LICENSE_QUERY = """
    WITH employee_ranking AS (
        SELECT
            emp.id AS emp_id,
            emp.first_name || ' ' || emp.last_name AS name,
            emp.mobile_phone AS phone,
            emp.active,
            emp.created_at,
            emp.updated_at,
            ROW_NUMBER() OVER (
                PARTITION BY emp.id
                ORDER BY emp.active DESC, emp.updated_at DESC
            ) AS emp_rank
        FROM employees emp
    ),
    ranked_licenses AS (
        SELECT
            er.emp_id AS id,
            er.name,
            er.phone,
            er.active,
            er.created_at,
            er.updated_at,
            l.number AS license_number,
            l.expires_on AS license_expiry,
            l.license_type_id AS license_type,
            ROW_NUMBER() OVER (
                PARTITION BY l.employee_id
                ORDER BY l.expires_on DESC NULLS LAST
            ) AS license_rank
        FROM licenses l
        JOIN employee_ranking er ON l.employee_id = er.emp_id
        WHERE er.emp_rank = 1
    )
    SELECT * FROM ranked_licenses
    WHERE license_rank = 1
        AND (:active_only = false OR active = true)
    ORDER BY id
"""

_ROLE_QUERY = """
    WITH ranked_roles AS (
        SELECT
            er.employee_id AS id,
            emp.first_name || ' ' || emp.last_name AS name,
            r.name AS role,
            d.name AS department,
            er.active,
            er.created_at,
            er.updated_at,
            ROW_NUMBER() OVER (
                PARTITION BY er.employee_id
                ORDER BY er.active DESC, er.created_at DESC
            ) AS row_num
        FROM employee_roles er
        JOIN roles r ON er.role_id = r.id
        JOIN departments d ON r.department_id = d.id
        JOIN employees emp ON er.employee_id = emp.id
        WHERE emp.email NOT LIKE '%test%'
            AND emp.email NOT LIKE '%example%'
    )
    SELECT id, name, role, department, active, created_at, updated_at
    FROM ranked_roles
    WHERE row_num = 1
        AND (:active_only = false OR active = true)
    ORDER BY id
"""

DEFAULT_QUERIES: Final[dict[str, str]] = {
    "contact": _EMPLOYEE_BASE,
    "employee": _EMPLOYEE_BASE,
    "license": _LICENSE_QUERY,
    "role": _ROLE_QUERY,
}
