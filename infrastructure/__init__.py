"""
Infrastructure Package
======================

Provides abstraction layers for external dependencies following the Dependency Inversion Principle.

Modules:
    - storage: Listing persistence abstraction (Django ORM, in-memory)
    - container: Service container wiring stores into domain services

This package enables:
    - Easy testing with in-memory implementations
    - Switching between stores without code changes
    - Loose coupling between business logic and infrastructure
"""
