"""
LinkMe - community help-matching backend.

Users post help requests; volunteers browse them ranked by a match score,
accept one, talk to the requester in a conversation, and both sides rate
each other afterwards.

Subpackages
-----------
- api: FastAPI router and request models
- database: settings, engine, ORM entities, DAOs and the core operations
- matching: distance and match scoring (pure functions)
- crypt: password and identity hashing
"""
