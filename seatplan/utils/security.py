"""
Security utilities and authentication
"""

import time
from collections import defaultdict
from fastapi import HTTPException, Depends, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from seatplan.core.config import settings

# Per-IP request timestamps for the public share view
rate_limiter = defaultdict(list)

security = HTTPBearer()

def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Verify admin authentication token"""
    if credentials.credentials != settings.ADMIN_TOKEN:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token"
        )
    return credentials.credentials

def rate_limit_check(client_ip: str, limit: int = settings.RATE_LIMIT_PER_MINUTE) -> bool:
    """Sliding one-minute window per client IP"""
    now = time.time()
    recent = [t for t in rate_limiter[client_ip] if t > now - 60]
    if len(recent) >= limit:
        rate_limiter[client_ip] = recent
        return False
    recent.append(now)
    rate_limiter[client_ip] = recent
    return True

def get_client_ip(request: Request) -> str:
    """Client IP, honouring reverse proxy headers"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip
    return request.client.host if request.client else "unknown"
