"""
Feature modules for the marketplace client core.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models and enums
- service.py: Implementation plus singleton getter
- exceptions.py: Module-specific exceptions

Modules communicate through interfaces, not concrete implementations.
"""
