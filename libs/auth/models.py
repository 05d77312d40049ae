from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

ADMIN_ROLES = {"service_role"}


class AuthUser(BaseModel):
    """
    Represents an authenticated user from Supabase.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: str = "authenticated"
    app_metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        """Platform admins carry the service role or an `admin` app role claim."""
        return self.role in ADMIN_ROLES or self.app_metadata.get("role") == "admin"

    def owns_email(self, email: Optional[str]) -> bool:
        if not email or not self.email:
            return False
        return self.email.lower() == email.lower()
