"""HTTP middleware: security headers, CORS parsing, rate limiting."""
