from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional

from teacher_eval.models.role_model import ADMIN_ROLES, ROLE_STUDENT


# Pydantic model cho payload của JWT
class TokenData(BaseModel):
    user_id: Optional[int] = None
    session_token: Optional[str] = None


# Pydantic model cho người dùng đã xác thực
class AuthenticatedUser(BaseModel):
    user_id: int = Field(..., example=1, description="ID của người dùng")
    username: str = Field(..., example="john_doe", description="Tên đăng nhập")
    roles: List[str] = Field(..., example=["student"], description="Danh sách vai trò của người dùng")
    is_active: bool = Field(True, example=True, description="Trạng thái hoạt động của người dùng")
    full_name: Optional[str] = Field(None, example="John Doe", description="Họ và tên đầy đủ")
    email: Optional[EmailStr] = Field(None, example="john.doe@example.com", description="Email của người dùng")
    session_token: Optional[str] = Field(None, description="Mã phiên cấp lúc đăng nhập")

    class Config:
        from_attributes = True

    @property
    def is_admin(self) -> bool:
        return any(role in ADMIN_ROLES for role in self.roles)

    @property
    def is_student(self) -> bool:
        return ROLE_STUDENT in self.roles

    @property
    def primary_role(self) -> str:
        return self.roles[0] if self.roles else "Unknown"


class LoginRequest(BaseModel):
    """
    Schema cho yêu cầu đăng nhập.
    """
    username: str = Field(..., example="johndoe")
    password: str = Field(..., example="secure_password")


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    username: str
    full_name: Optional[str] = None
    roles: List[str] = []


class LogoutResponse(BaseModel):
    message: str
    session_closed: bool
