from sqlalchemy import Column, String, DateTime, ForeignKey, Boolean, Text
from sqlalchemy.orm import relationship
from app.database import Base, generate_uuid, utcnow


class Team(Base):
    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)

    branch_id = Column(String(36), ForeignKey("branches.id"), nullable=False, index=True)
    # Team leader (a user whose own team_id normally points back here)
    leader_id = Column(String(36), ForeignKey("users.id", use_alter=True, name="fk_team_leader_id"), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    branch = relationship("Branch", back_populates="teams")
    leader = relationship("User", foreign_keys=[leader_id], back_populates="led_teams")
    members = relationship("User", foreign_keys="User.team_id", back_populates="team")
    goals = relationship("Goal", back_populates="team")

    def __repr__(self):
        return f"<Team {self.name}>"

    @property
    def active_members(self):
        return [member for member in self.members if member.is_active]
