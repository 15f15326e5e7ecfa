from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from teacher_eval.database import Base
from teacher_eval.models.association_tables import user_roles

# Tên vai trò dùng trong has_roles()
ROLE_SUPER_ADMIN = "super_admin"
ROLE_ADMIN = "admin"
ROLE_STUDENT = "student"
ADMIN_ROLES = [ROLE_SUPER_ADMIN, ROLE_ADMIN]


class Role(Base):
    __tablename__ = "roles"

    role_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, index=True, nullable=False)

    users = relationship("User", secondary=user_roles, back_populates="roles")

    def __repr__(self):
        return f"<Role(name='{self.name}')>"
