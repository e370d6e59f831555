"""Duration units: the day-based unit table and display formatting.

Every duration the engine adds up is normalized to days first. Weeks and months
are work-calendar units (5 and 20 days by default) and can be overridden from a
YAML file so teams on a different cadence get consistent totals.
"""
