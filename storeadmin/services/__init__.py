"""
REST services for storeadmin.

Contains:
- HTTP client (requests wrapper with the `data` envelope)
- Auth provider contract
- Reviews Service
- Checkout Service
"""
