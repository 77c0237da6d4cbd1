"""
Feature modules for Tether.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's collaborators
- models.py: Pydantic models and validation rules
- flow.py: The user-facing state machine
- exceptions.py: Module-specific exceptions

Modules communicate through interfaces, not concrete implementations.
"""
