"""
Production-only middleware for the Arcane Archives: rate limiting and security headers.
"""
