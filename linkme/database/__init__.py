"""
The `database` package holds everything between the API router and storage.

Contents:
    - config:
        Environment-driven settings and the SQLAlchemy engine. One backend per
        deployment: PostgreSQL for the shared server, or a SQLite file.

    - entities:
        ORM models for users, help requests, conversations, messages and ratings.

    - daos:
        Data Access Objects, one per entity, including the conditional
        updates the request state machine and rating aggregate rely on.

    - core:
        The operations the router calls. Each runs in its own transaction.

    - helpers:
        The `@transactional` decorator and its session factory.
"""
