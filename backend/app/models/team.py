"""
Team and membership models.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid

from app.db.base import Base, utcnow

TEAM_ROLES = ("owner", "admin", "member")
ASSIGNABLE_ROLES = ("member", "admin")


class Team(Base):
    """Group of users owned by a business account."""

    __tablename__ = "teams"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False)
    description = Column(String(500), nullable=True)
    owner_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    members = relationship(
        "TeamMember",
        back_populates="team",
        cascade="all, delete-orphan",
        order_by="TeamMember.position",
        lazy="selectin",
    )

    def membership(self, user_id: uuid.UUID):
        for member in self.members:
            if member.user_id == user_id:
                return member
        return None

    def __repr__(self):
        return f"<Team(id={self.id}, name={self.name})>"


class TeamMember(Base):
    """Membership entry; ``position`` keeps insertion order."""

    __tablename__ = "team_members"
    __table_args__ = (UniqueConstraint("team_id", "user_id", name="uq_team_members_team_user"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    team_id = Column(Uuid, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default="member")
    position = Column(Integer, nullable=False, default=0)
    added_at = Column(DateTime, default=utcnow, nullable=False)

    team = relationship("Team", back_populates="members")
    user = relationship("User", lazy="selectin")

    def __repr__(self):
        return f"<TeamMember(team_id={self.team_id}, user_id={self.user_id}, role={self.role})>"
