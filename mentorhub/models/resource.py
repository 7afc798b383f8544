from sqlalchemy import TIMESTAMP, Column, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship
from mentorhub.database import Base

RESOURCE_TYPES = ("file", "link")
RESOURCE_CATEGORIES = ("course", "article", "assignment", "repository", "tool", "other")


class Resource(Base):
    __tablename__ = "resources"

    id = Column(Integer, primary_key=True, index=True)
    mentor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    mentor_email = Column(String(255), nullable=False, index=True)
    mentor_name = Column(String(100), nullable=False)
    type = Column(String(10), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, default="")
    category = Column(String(20), nullable=False, default="other")

    # For links
    url = Column(String(2048))

    # For files
    file_name = Column(String(255))
    file_size = Column(Integer)
    file_type = Column(String(255))
    file_path = Column(String(1024))

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    mentor = relationship("User")
