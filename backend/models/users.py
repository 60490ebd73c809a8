# backend/models/users.py
from sqlalchemy import Column, Integer, String
from database import Base

# Staff account; identified by the email carried in the bearer token
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    role = Column(String, nullable=False) # ADMIN, STAFF
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
