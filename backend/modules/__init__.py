"""
Feature modules for the Vigia core.

Each module is self-contained:
- auth: interfaces, models, exceptions, repository, rate limiter, notifier, service
- cases: interfaces, models, repository, state store, report queries
- scoring: interfaces, models, service

Modules communicate through interfaces, not concrete implementations.
"""
