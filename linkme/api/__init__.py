"""
API Package - FastAPI Router • Request Models
=============================================

Contents
--------
- fast_api
    FastAPI router mounted under ``/api`` with endpoints for:
      • Auth: register, login
      • Users: read, update profile
      • Help requests: create, list, matches for a volunteer, accept, cancel
      • Conversations: get-or-create, list; messages: create, list, mark read
      • Ratings: submit, check

- models
    Pydantic data contracts for request validation:
      • UserCredentials, UserData, UserUpdate (auth and profiles)
      • HelpRequestCreation, AcceptDetails, CancelDetails (help requests)
      • ConversationCreationDetails, NewMessage, ReadReceipt (chat)
      • RatingDetails (ratings)
    These models power automatic OpenAPI schema generation and strict validation.

Errors
------
Core errors (`linkme.exceptions`) are mapped to HTTP status codes by the
router: 400 invalid input, 401 bad credentials, 404 not found, 409 state or
duplicate conflicts, 503 storage failures.
"""
