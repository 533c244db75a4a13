"""
CRM inquiry models

- Inquiry: lead coming in from the website, email, WhatsApp ...
- InquiryHistory: status / assignment changes
- KanbanStage: board columns, one per InquiryStatus
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON
from app.db.base import Base
from app.models.enums import InquiryStatus


class Inquiry(Base):
    """Sales inquiry"""
    __tablename__ = "inquiries"

    id = Column(Integer, primary_key=True, index=True)
    source = Column(String(30), nullable=False, comment="InquirySource")
    customer_name = Column(String(200))
    email = Column(String(200))
    phone = Column(String(50))
    message = Column(Text)
    status = Column(String(20), nullable=False, default=InquiryStatus.NEW.value, index=True, comment="InquiryStatus")

    # salesperson owning the lead
    assigned_to = Column(String(100), index=True)
    assigned_at = Column(DateTime)

    # lookingFor / attemptCount / isFailedLead / failedAt
    extra = Column("metadata", JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Inquiry {self.id}: {self.customer_name} [{self.status}]>"

    @property
    def attempt_count(self) -> int:
        try:
            return int((self.extra or {}).get("attemptCount") or 0)
        except (TypeError, ValueError):
            return 0

    @property
    def is_failed_lead(self) -> bool:
        return bool((self.extra or {}).get("isFailedLead"))


class InquiryHistory(Base):
    """Inquiry audit trail"""
    __tablename__ = "inquiry_history"

    id = Column(Integer, primary_key=True, index=True)
    inquiry_id = Column(Integer, ForeignKey("inquiries.id", ondelete="CASCADE"), nullable=False, index=True)
    # STATUS_CHANGED / ASSIGNED / RELEASED / AUTO_RELEASED / UPDATED
    action = Column(String(30), nullable=False)
    previous_status = Column(String(20))
    new_status = Column(String(20))
    notes = Column(Text)
    changed_by = Column(String(100))
    created_at = Column(DateTime, default=datetime.utcnow, index=True)


class KanbanStage(Base):
    """Board column"""
    __tablename__ = "kanban_stages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    order = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, unique=True, comment="InquiryStatus shown in this column")
    color = Column(String(20))
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<KanbanStage {self.order}: {self.name}>"
