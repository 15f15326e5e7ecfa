from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import relationship
from passlib.context import CryptContext  # type: ignore
from teacher_eval.database import Base
from teacher_eval.models.association_tables import user_roles

# Context cho hashing/verify password
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class User(Base):
    """
    Model for the users table (quản trị viên và học sinh đều đăng nhập qua bảng này).
    """
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    full_name = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    roles = relationship("Role", secondary=user_roles, back_populates="users", passive_deletes=True)
    student = relationship("Student", back_populates="user", uselist=False, passive_deletes="all")

    def __repr__(self):
        return f"<User(user_id={self.user_id}, username='{self.username}')>"

    @property
    def role_names(self):
        return [role.name for role in self.roles]

    def verify_password(self, plain_password: str) -> bool:
        return pwd_context.verify(plain_password.encode('utf-8')[:72], self.password)

    def set_password(self, plain_password: str):
        self.password = pwd_context.hash(plain_password.encode('utf-8')[:72])
