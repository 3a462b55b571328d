"""
SQL-backed Outlet rows — one row per outlet plus one row per stage visit.

stage_logs.position keeps history in its in-memory order, which is not
always timestamp order.
"""
from sqlalchemy import Column, Text, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from outlet_ops.database import Base


class DbOutlet(Base):
    __tablename__ = 'outlets'

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False, index=True)
    brand = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    status = Column(Text, nullable=False)
    priority = Column(Text, nullable=False, default='medium')
    description = Column(Text, default='')
    current_stage = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    last_moved_at = Column(DateTime(timezone=True), nullable=False)
    is_archived = Column(Boolean, nullable=False, default=False)
    archived_at = Column(DateTime(timezone=True), nullable=True)

    history = relationship(
        'DbStageLog',
        order_by='DbStageLog.position',
        cascade='all, delete-orphan',
        back_populates='outlet',
    )


class DbStageLog(Base):
    __tablename__ = 'stage_logs'

    id = Column(Integer, primary_key=True, autoincrement=True)
    outlet_id = Column(Text, ForeignKey('outlets.id', ondelete='CASCADE'), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    stage = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    note = Column(Text, nullable=True)

    outlet = relationship('DbOutlet', back_populates='history')
