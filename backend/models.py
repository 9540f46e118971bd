from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime, Time, Enum, ForeignKey, Table, UniqueConstraint, CheckConstraint, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from database import Base
from constants import Authority, GroupRole, DayOfWeek


group_instructors = Table(
    'group_instructors',
    Base.metadata,
    Column('group_id', Integer, ForeignKey('church_groups.id_group', ondelete='CASCADE'), primary_key=True),
    Column('user_id', Integer, ForeignKey('users.id_user', ondelete='CASCADE'), primary_key=True),
)


class User(Base):
    """
    A registered person: administrator, instructor or congregation member.

    ``username`` is the login e-mail and is unique. ``role`` is a write-through
    view over the authorities collection so request DTOs can carry a single
    role name.
    """
    __tablename__ = 'users'

    id_user = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, nullable=False, unique=True)
    password = Column(String)
    date_register = Column(DateTime, nullable=False, default=datetime.utcnow)
    enabled = Column(Boolean, nullable=False, default=True)
    user_register = Column(String)

    age = Column(Integer)
    names = Column(String)
    phone = Column(String)
    paternal_surname = Column(String)
    maternal_surname = Column(String)
    residency_city = Column(String)
    number_dependents = Column(Integer)
    dependents = Column(Text)

    authority_entries = relationship(
        "UserAuthority", back_populates="user", cascade="all, delete-orphan", lazy="selectin"
    )
    groups = relationship("GroupMember", back_populates="user", cascade="all, delete-orphan")
    worships = relationship("WorshipMember", back_populates="user", cascade="all, delete-orphan")
    special_events = relationship("SpecialEventMember", back_populates="user", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("username != ''"),
    )

    @property
    def authorities(self) -> list[Authority]:
        return [entry.authority for entry in self.authority_entries]

    def set_authorities(self, authorities):
        self.authority_entries = [UserAuthority(authority=Authority(a)) for a in authorities]

    @property
    def role(self) -> str | None:
        authorities = self.authorities
        return authorities[0].value if authorities else None

    @role.setter
    def role(self, value):
        if value is not None:
            self.set_authorities([value])

    def has_authority(self, authority: Authority) -> bool:
        return authority in self.authorities


class UserAuthority(Base):
    __tablename__ = 'user_authorities'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id_user', ondelete='CASCADE'), nullable=False)
    authority = Column(Enum(Authority), nullable=False)

    user = relationship("User", back_populates="authority_entries")

    __table_args__ = (
        UniqueConstraint('user_id', 'authority', name='uq_user_authority'),
    )


class Category(Base):
    __tablename__ = 'categories'

    id_category = Column(Integer, primary_key=True, autoincrement=True)
    name_category = Column(String, nullable=False, unique=True)

    groups = relationship("Group", back_populates="category")


class Group(Base):
    """
    A small group that meets weekly.

    Instructors are assigned by administrators; members enrol themselves
    through the join endpoint.
    """
    __tablename__ = 'church_groups'

    id_group = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)
    address = Column(String)
    phone = Column(String)
    day_of_week = Column(Enum(DayOfWeek))
    hour = Column(Time)
    id_category = Column(Integer, ForeignKey('categories.id_category'))
    user_responsible_id = Column(Integer, ForeignKey('users.id_user'))

    category = relationship("Category", back_populates="groups")
    user_responsible = relationship("User", foreign_keys=[user_responsible_id])
    instructors = relationship("User", secondary=group_instructors, order_by="User.id_user")
    members = relationship("GroupMember", back_populates="group", cascade="all, delete-orphan")


class GroupMember(Base):
    __tablename__ = 'group_members'

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_id = Column(Integer, ForeignKey('church_groups.id_group', ondelete='CASCADE'), nullable=False)
    user_id = Column(Integer, ForeignKey('users.id_user', ondelete='CASCADE'), nullable=False)
    role = Column(Enum(GroupRole), nullable=False, default=GroupRole.MEMBER)
    joined_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    group = relationship("Group", back_populates="members")
    user = relationship("User", back_populates="groups")

    __table_args__ = (
        UniqueConstraint('group_id', 'user_id', name='uq_group_member'),
    )


class Worship(Base):
    """A weekly worship service"""
    __tablename__ = 'worships'

    id_worship = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)
    address = Column(String)
    phone = Column(String)
    day_of_week = Column(Enum(DayOfWeek), nullable=False)
    hour = Column(Time)
    user_responsible_id = Column(Integer, ForeignKey('users.id_user'))

    user_responsible = relationship("User", foreign_keys=[user_responsible_id])
    members = relationship("WorshipMember", back_populates="worship", cascade="all, delete-orphan")


class WorshipMember(Base):
    __tablename__ = 'worship_members'

    id = Column(Integer, primary_key=True, autoincrement=True)
    worship_id = Column(Integer, ForeignKey('worships.id_worship', ondelete='CASCADE'), nullable=False)
    user_id = Column(Integer, ForeignKey('users.id_user', ondelete='CASCADE'), nullable=False)
    role = Column(Enum(GroupRole), nullable=False, default=GroupRole.MEMBER)
    joined_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    worship = relationship("Worship", back_populates="members")
    user = relationship("User", back_populates="worships")

    __table_args__ = (
        UniqueConstraint('worship_id', 'user_id', name='uq_worship_member'),
    )


class SpecialEvent(Base):
    """A one-off event with a limited number of slots"""
    __tablename__ = 'special_events'

    id_special_event = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)
    address = Column(String)
    phone = Column(String)
    day_of_week = Column(Enum(DayOfWeek), nullable=False)
    hour = Column(Time)
    number_of_slots = Column(Integer)
    user_responsible_id = Column(Integer, ForeignKey('users.id_user'))

    user_responsible = relationship("User", foreign_keys=[user_responsible_id])
    members = relationship("SpecialEventMember", back_populates="special_event", cascade="all, delete-orphan")

    @property
    def available_slots(self) -> int | None:
        if self.number_of_slots is None:
            return None
        return max(self.number_of_slots - len(self.members), 0)


class SpecialEventMember(Base):
    __tablename__ = 'special_event_members'

    id = Column(Integer, primary_key=True, autoincrement=True)
    special_event_id = Column(Integer, ForeignKey('special_events.id_special_event', ondelete='CASCADE'), nullable=False)
    user_id = Column(Integer, ForeignKey('users.id_user', ondelete='CASCADE'), nullable=False)
    joined_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    special_event = relationship("SpecialEvent", back_populates="members")
    user = relationship("User", back_populates="special_events")

    __table_args__ = (
        UniqueConstraint('special_event_id', 'user_id', name='uq_special_event_member'),
    )


class AppConfig(Base):
    __tablename__ = 'app_config'

    config_key = Column(String, primary_key=True)
    config_value = Column(String)


class LoginLog(Base):
    __tablename__ = 'login_logs'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id_user', ondelete='SET NULL'))
    username = Column(String, nullable=False)
    login_time = Column(DateTime, nullable=False, default=datetime.utcnow)
    ip_address = Column(String)
    user_agent = Column(String)
    authenticated = Column(Boolean, nullable=False, default=True)

    user = relationship("User")

    __table_args__ = (
        Index('idx_login_logs_username', 'username'),
    )
