"""
Service layer: orchestrates repositories, enforces existence and tenancy
rules and owns transaction commits.
"""
