"""
microtodo.services

Service layer.

Responsibilities:
- Compose repositories with authorization rules.
- Keep routers thin (validation + auth + delegation).
"""

# Package marker.
