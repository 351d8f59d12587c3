"""
Portfolio admin backend.

Admin identity, login lockout, JWT issuance and server-side session
tracking for the portfolio site's management API.
"""
