"""
Security headers for GradTrack responses.

JSON API responses never load sub-resources, so they get a deny-all
Content-Security-Policy. The HTML fragments under /views/ get a policy that
allows their own stylesheet rules and nothing from other origins.
"""

from flask import request

API_CSP = "default-src 'none'; frame-ancestors 'none'"
FRAGMENT_CSP = (
    "default-src 'self'; "
    "style-src 'self' 'unsafe-inline'; "
    "img-src 'self' data:; "
    "frame-ancestors 'self'; "
    "base-uri 'self'; "
    "form-action 'self'"
)

STATIC_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=(), payment=()",
}


def content_security_policy(response):
    if response.mimetype == "text/html":
        return FRAGMENT_CSP
    return API_CSP


def init_security_headers(app):
    hsts = f"max-age={app.config.get('HSTS_MAX_AGE', 31536000)}; includeSubDomains"

    @app.after_request
    def _add_security_headers(response):
        headers = response.headers
        headers.setdefault("Content-Security-Policy", content_security_policy(response))
        for name, value in STATIC_HEADERS.items():
            headers.setdefault(name, value)
        if request.is_secure:
            headers.setdefault("Strict-Transport-Security", hsts)
        headers.pop("Server", None)
        return response
