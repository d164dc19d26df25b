from typing import Optional

from fastapi import Header, HTTPException


def get_tenant_id(x_tenant_id: str = Header(...)) -> str:
    tenant_id = x_tenant_id.strip()
    if not tenant_id:
        raise HTTPException(status_code=400, detail="X-Tenant-ID header is missing")
    return tenant_id


def get_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Identity of the caller as forwarded by the gateway; stamped on created/updated rows."""
    return x_user_id.strip() if x_user_id and x_user_id.strip() else None
