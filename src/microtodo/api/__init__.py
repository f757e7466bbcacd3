"""
microtodo.api

API package for the identity and task services.

Responsibilities:
- FastAPI app factories and router modules.
- API-layer dependency wiring, request/response models and error mapping.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request validation + auth + delegation to services.
