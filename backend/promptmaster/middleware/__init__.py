"""
PromptMaster Backend - Middleware Package
=========================================

Middleware chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate limit rejects abusive clients before anything else runs
    2. Request ID sets the correlation ID used by every later log line
    3. Logging records status and duration on the way out
"""
