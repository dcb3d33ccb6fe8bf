"""
Security Headers Middleware - API Layer

Adds protective headers to every HTTP response, including error responses
produced further down the stack.

@.architecture
Incoming: app.py (middleware registration), HTTP requests --- {FastAPI Request objects, HTTP responses from inner middleware}
Processing: __call__(), _add_headers(), build_csp_header(), build_hsts_header() --- {2 jobs: header_injection, response_interception}
Outgoing: Frontend (HTTP) --- {HTTP Response with CSP, COOP, CORP, HSTS, X-Content-Type-Options, X-Frame-Options, Referrer-Policy and related headers}
"""

from typing import Dict, Optional

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from monitoring import get_logger

logger = get_logger(__name__)


class SecurityHeadersConfig:
    """Configuration for security headers."""

    def __init__(
        self,
        # Content Security Policy
        enable_csp: bool = True,
        csp_directives: Optional[Dict[str, str]] = None,

        # Cross-origin isolation
        cross_origin_opener_policy: Optional[str] = "same-origin",
        cross_origin_resource_policy: Optional[str] = "same-origin",
        origin_agent_cluster: Optional[str] = "?1",

        # Frame protection
        x_frame_options: Optional[str] = "SAMEORIGIN",

        # Legacy XSS auditor (off)
        x_xss_protection: Optional[str] = "0",

        # Content type sniffing
        x_content_type_options: Optional[str] = "nosniff",

        # Referrer policy
        referrer_policy: Optional[str] = "no-referrer",

        # Misc legacy hardening
        x_dns_prefetch_control: Optional[str] = "off",
        x_download_options: Optional[str] = "noopen",
        x_permitted_cross_domain_policies: Optional[str] = "none",

        # HSTS
        enable_hsts: bool = True,
        hsts_max_age: int = 15552000,  # 180 days in seconds
        hsts_include_subdomains: bool = True,
        hsts_preload: bool = False,
    ):
        self.enable_csp = enable_csp
        self.csp_directives = csp_directives or self._default_csp_directives()
        self.cross_origin_opener_policy = cross_origin_opener_policy
        self.cross_origin_resource_policy = cross_origin_resource_policy
        self.origin_agent_cluster = origin_agent_cluster
        self.x_frame_options = x_frame_options
        self.x_xss_protection = x_xss_protection
        self.x_content_type_options = x_content_type_options
        self.referrer_policy = referrer_policy
        self.x_dns_prefetch_control = x_dns_prefetch_control
        self.x_download_options = x_download_options
        self.x_permitted_cross_domain_policies = x_permitted_cross_domain_policies
        self.enable_hsts = enable_hsts
        self.hsts_max_age = hsts_max_age
        self.hsts_include_subdomains = hsts_include_subdomains
        self.hsts_preload = hsts_preload

    @staticmethod
    def _default_csp_directives() -> Dict[str, str]:
        """Default Content Security Policy directives."""
        return {
            "default-src": "'self'",
            "base-uri": "'self'",
            "font-src": "'self' https: data:",
            "form-action": "'self'",
            "frame-ancestors": "'self'",
            "img-src": "'self' data:",
            "object-src": "'none'",
            "script-src": "'self'",
            "script-src-attr": "'none'",
            "style-src": "'self' https: 'unsafe-inline'",
            "upgrade-insecure-requests": "",
        }

    def build_csp_header(self) -> str:
        """Build Content-Security-Policy header value."""
        directives = []
        for key, value in self.csp_directives.items():
            if value:
                directives.append(f"{key} {value}")
            else:
                directives.append(key)
        return ";".join(directives)

    def build_hsts_header(self) -> str:
        """Build Strict-Transport-Security header value."""
        parts = [f"max-age={self.hsts_max_age}"]
        if self.hsts_include_subdomains:
            parts.append("includeSubDomains")
        if self.hsts_preload:
            parts.append("preload")
        return "; ".join(parts)

    def build_headers(self) -> Dict[str, str]:
        """All enabled headers, computed once per middleware instance."""
        headers: Dict[str, str] = {}

        if self.enable_csp:
            headers["Content-Security-Policy"] = self.build_csp_header()

        optional = {
            "Cross-Origin-Opener-Policy": self.cross_origin_opener_policy,
            "Cross-Origin-Resource-Policy": self.cross_origin_resource_policy,
            "Origin-Agent-Cluster": self.origin_agent_cluster,
            "Referrer-Policy": self.referrer_policy,
            "X-Content-Type-Options": self.x_content_type_options,
            "X-DNS-Prefetch-Control": self.x_dns_prefetch_control,
            "X-Download-Options": self.x_download_options,
            "X-Frame-Options": self.x_frame_options,
            "X-Permitted-Cross-Domain-Policies": self.x_permitted_cross_domain_policies,
            "X-XSS-Protection": self.x_xss_protection,
        }
        headers.update({name: value for name, value in optional.items() if value})

        if self.enable_hsts:
            headers["Strict-Transport-Security"] = self.build_hsts_header()

        return headers


class SecurityHeadersMiddleware:
    """
    Middleware to add security headers to all responses.

    Protects against:
    - XSS (Cross-Site Scripting)
    - Clickjacking
    - MIME-sniffing attacks
    - Protocol downgrade attacks (with HSTS)
    - Cross-origin data leaks
    """

    def __init__(
        self,
        app: ASGIApp,
        config: Optional[SecurityHeadersConfig] = None
    ):
        self.app = app
        self.config = config or SecurityHeadersConfig()
        self._headers = self.config.build_headers()
        logger.debug("Security headers middleware initialized", headers=len(self._headers))

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                self._add_headers(MutableHeaders(scope=message))
            await send(message)

        await self.app(scope, receive, send_with_headers)

    def _add_headers(self, headers: MutableHeaders) -> None:
        for name, value in self._headers.items():
            # Values set by handlers win
            headers.setdefault(name, value)

        # No framework fingerprint
        if "x-powered-by" in headers:
            del headers["x-powered-by"]


def create_security_headers_middleware():
    """
    Create security headers middleware factory.

    Returns:
        Middleware class and kwargs for FastAPI
    """
    return (SecurityHeadersMiddleware, {"config": SecurityHeadersConfig()})
