"""
Core operations called by the API router.

Contents
--------
- funcs
    Users (register, login, read, update), conversations (get-or-create,
    list) and messages (create, list, mark read).
- help_requests
    The help request state machine and volunteer-facing match listings.
- ratings
    Rating submission with the running-average aggregate, rating checks.
- validation
    Input coercion shared by the modules above.

Every public operation runs in its own transaction via `@transactional`.
"""
