from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from murajaah.database import Base

class ReviewItemRecord(Base):
    """SM-2 spaced repetition state per memorisation item"""
    __tablename__ = "review_items"
    
    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, index=True)
    subject_id = Column(String, nullable=False, index=True)
    
    # SM-2 algorithm fields
    ease_factor = Column(Float, default=2.5)  # EF: difficulty rating
    interval = Column(Integer, default=1)  # days until next review
    repetitions = Column(Integer, default=0)  # consecutive successful reviews
    
    # Stored in UTC
    next_review_at = Column(DateTime(timezone=True), nullable=False, index=True)
    last_reviewed_at = Column(DateTime(timezone=True))
    last_quality = Column(Integer)  # 0-5
    
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    
    review_logs = relationship("ReviewLog", back_populates="item")
