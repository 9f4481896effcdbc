# app/models/mall.py
from sqlalchemy import Column, Integer, String
from app.database import Base


class Mall(Base):
    __tablename__ = "malls"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    location = Column(String(300))

    def __repr__(self):
        return f"<Mall {self.id} name={self.name}>"
