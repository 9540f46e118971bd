"""
Data Transfer Objects (DTOs) Layer

Decouples the API from the database models.

Structure:
- request/: bodies bound onto entities by ``binding.Binding``
- response/: payloads returned inside the ``Message`` envelope
"""
