"""
The `daos` package contains the Data Access Objects (DAOs).
Each DAO encapsulates persistence for one entity and expects an active
SQLAlchemy session from the caller.

Contents
--------
- user_dao
    `UserDao`: create users (password hashing), lookup by id/email/identity
    hash, profile updates, atomic rating-aggregate update.

- help_request_dao
    `HelpRequestDao`: create requests, lookup by id/owner/open status,
    compare-and-set status transitions.

- conversation_dao
    `ConversationDao`: create conversations, symmetric participant-pair
    lookup, listing by user, `updated_at` bumps.

- message_dao
    `MessageDao`: create messages, chronological retrieval, latest message,
    read-marking.

- rating_dao
    `RatingDao`: insert ratings and look them up by (request, rater).
"""
