# app/models/user.py
"""
Registered users table — the credential store.
Passwords are stored only as bcrypt hashes (see app/utils/security.py).
"""

from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(254), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    phone_number = Column(String(30))
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<User {self.id} email={self.email}>"
