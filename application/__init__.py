"""Application layer for the API boilerplate.

This layer holds the use cases (commands), the ports they depend on, the
DTOs exchanged with clients, the translators between DTOs and domain
entities, and the settings schemas bound from configuration.
"""
