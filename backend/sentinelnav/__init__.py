"""SentinelNav Application Package — curated site directory with reachability monitoring.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
