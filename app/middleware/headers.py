"""
Security headers middleware for FastAPI.
This middleware is production-only.
"""
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all responses.
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        # Content Security Policy
        # The reader embeds PDFs and images served from this origin
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "object-src 'self'; "
            "frame-src 'self'; "
            "frame-ancestors 'self'; "
            "base-uri 'self'; "
            "form-action 'self';"
        )

        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"

        # Only allow framing by our own reader page
        response.headers["X-Frame-Options"] = "SAMEORIGIN"

        # Referrer Policy
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Permissions Policy (replaces Feature-Policy)
        response.headers["Permissions-Policy"] = (
            "geolocation=(), "
            "microphone=(), "
            "camera=(), "
            "payment=()"
        )

        # Uploaded files are public, but delete redirects must not be cached
        if request.url.path.startswith("/upload/delete"):
            response.headers["Cache-Control"] = "no-store"

        # Remove server identification headers
        if "Server" in response.headers:
            del response.headers["Server"]
        response.headers["Server"] = "Arcane-Archives"

        return response
