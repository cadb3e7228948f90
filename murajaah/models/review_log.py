from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from murajaah.database import Base

class ReviewLog(Base):
    """Record of one graded review of an item"""
    __tablename__ = "review_logs"
    
    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(String, ForeignKey("review_items.id"), nullable=False, index=True)
    
    quality = Column(Integer, nullable=False)  # 0-5
    reviewed_at = Column(DateTime(timezone=True), nullable=False)
    response_time_ms = Column(Integer)
    
    # SM-2 state after this review
    ease_factor = Column(Float, nullable=False)
    interval = Column(Integer, nullable=False)
    
    item = relationship("ReviewItemRecord", back_populates="review_logs")
