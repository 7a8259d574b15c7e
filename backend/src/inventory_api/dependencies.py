"""Shared FastAPI dependencies.

Reusable type aliases and dependency functions that routers import.
Defined here (not in main.py) to avoid circular imports when routers
are registered in main.
"""

from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.authentication import SimpleUser

from inventory_api.db.session import get_db
from inventory_api.security import ROLE_ADMIN, RequireRole, require_authenticated

DB = Annotated[AsyncSession, Depends(get_db)]

# Any authenticated caller
CurrentUser = Annotated[SimpleUser, Depends(require_authenticated)]

# Callers holding the ADMIN role
AdminUser = Annotated[SimpleUser, Depends(RequireRole(ROLE_ADMIN))]

Skip = Annotated[int, Query(ge=0)]
Limit = Annotated[int, Query(ge=1, le=100)]
