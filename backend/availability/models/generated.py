import uuid

from sqlalchemy import Column, ForeignKey, Index, Integer, Text, UniqueConstraint, text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


def _new_calendar_id() -> str:
    return uuid.uuid4().hex


class Businesses(Base):
    __tablename__ = 'businesses'

    name = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    min_booking_notice_hours = Column(Integer)  # NULL = service default
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    providers = relationship('Providers', back_populates='business')


class Providers(Base):
    __tablename__ = 'providers'

    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    calendar_id = Column(Text, nullable=False, unique=True, default=_new_calendar_id)
    id = Column(Integer, primary_key=True)
    display_name = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    business = relationship('Businesses', back_populates='providers')
    availability_rules = relationship('AvailabilityRules', back_populates='provider')
    availability_overrides = relationship('AvailabilityOverrides', back_populates='provider')


class AvailabilityRules(Base):
    __tablename__ = 'availability_rules'

    provider_id = Column(ForeignKey('providers.id', ondelete='CASCADE'), nullable=False)
    weekday = Column(Integer, nullable=False)  # 0 = Sunday ... 6 = Saturday
    start_time = Column(Text, nullable=False, server_default=text("'08:00:00'"))
    end_time = Column(Text, nullable=False, server_default=text("'17:00:00'"))
    max_concurrent_jobs = Column(Integer, nullable=False, server_default=text('1'))
    crew_capacity = Column(Integer, nullable=False, server_default=text('2'))
    morning_jobs = Column(Integer, nullable=False, server_default=text('0'))
    afternoon_jobs = Column(Integer, nullable=False, server_default=text('0'))
    morning_start = Column(Text, nullable=False, server_default=text("'08:00:00'"))
    afternoon_start = Column(Text, nullable=False, server_default=text("'12:00:00'"))
    afternoon_end = Column(Text, nullable=False, server_default=text("'17:00:00'"))
    id = Column(Integer, primary_key=True)

    provider = relationship('Providers', back_populates='availability_rules')


class AvailabilityOverrides(Base):
    __tablename__ = 'availability_overrides'
    __table_args__ = (
        UniqueConstraint('provider_id', 'date', 'kind', 'time_slot'),
        # time_slot is NULL for extras, so the constraint above never fires for them
        Index(
            'uq_availability_overrides_extra_per_day', 'provider_id', 'date',
            unique=True,
            sqlite_where=text("kind = 'extra'"),
            postgresql_where=text("kind = 'extra'"),
        ),
    )

    provider_id = Column(ForeignKey('providers.id', ondelete='CASCADE'), nullable=False)
    date = Column(Text, nullable=False)
    kind = Column(Text, nullable=False)  # block / extra
    id = Column(Integer, primary_key=True)
    time_slot = Column(Text)  # morning / afternoon / full_day; NULL = legacy full day
    start_time = Column(Text)
    end_time = Column(Text)
    max_concurrent_jobs = Column(Integer)
    note = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    provider = relationship('Providers', back_populates='availability_overrides')


class PublicAvailability(Base):
    __tablename__ = 'public_availability'
    __table_args__ = (
        UniqueConstraint('calendar_id', 'date'),
    )

    calendar_id = Column(Text, nullable=False)
    date = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    morning_status = Column(Text)
    afternoon_status = Column(Text)
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))
