"""
auth — Credential issuance and verification.

Provides:
  • Registration input validation
  • Password hashing (Argon2id with per-record salt)
  • ``CredentialEngine`` — register / login / user lookups
  • Register / Login / Users API routes
"""
