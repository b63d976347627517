from datetime import datetime, timezone
from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String, Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Vocab(Base):
    """Vocabulary pair: the phrase to learn and the first-language text prompting for it."""
    __tablename__ = "vocab"

    id = Column(Integer, primary_key=True, autoincrement=True)
    learning_lang = Column(String(255), nullable=False)  # phrase to produce
    first_lang = Column(String(255), nullable=False, default="")  # prompt text
    alternatives = Column(Text)  # comma separated accepted answers
    skill = Column(String(255))
    infinitive = Column(String(255))  # verbs only
    pos = Column(String(50))  # part of speech
    hint = Column(Text)
    created = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    studies = relationship("VocabStudy", back_populates="vocab", cascade="all, delete-orphan")


class Learner(Base):
    """A learner and their aggregate progress counters."""
    __tablename__ = "learner"
    __table_args__ = (
        CheckConstraint("smallest_vocab >= 1", name="ck_learner_smallest_vocab"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), default="")
    code = Column(String(255), default="")  # access code
    num_known = Column(Integer, default=0)
    num_correct = Column(Integer, default=0)
    num_incorrect = Column(Integer, default=0)
    total_percentage = Column(Float)
    smallest_vocab = Column(Integer, nullable=False, default=1)
    updated = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    studies = relationship("VocabStudy", back_populates="learner", cascade="all, delete-orphan")


class VocabStudy(Base):
    """A learner's progress on one vocabulary pair."""
    __tablename__ = "vocab_study"
    __table_args__ = (
        UniqueConstraint("vocab_id", "learner_id", name="uq_vocab_study_vocab_learner"),
        CheckConstraint("attempts >= 0", name="ck_vocab_study_attempts"),
        CheckConstraint(
            "percentage_correct IS NULL OR (percentage_correct >= 0.0 AND percentage_correct <= 1.0)",
            name="ck_vocab_study_percentage_correct",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    vocab_id = Column(Integer, ForeignKey("vocab.id", ondelete="CASCADE"), nullable=False)
    learner_id = Column(Integer, ForeignKey("learner.id", ondelete="CASCADE"), nullable=False)
    attempts = Column(Integer, nullable=False, default=0)
    correct_attempts = Column(Integer, nullable=False, default=0)
    percentage_correct = Column(Float)  # running correctness, NULL until first graded attempt
    last_change = Column(Float)
    last_tested = Column(DateTime(timezone=True))
    well_known = Column(Boolean, nullable=False, default=False)
    user_notes = Column(Text, default="")
    created = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    vocab = relationship("Vocab", back_populates="studies")
    learner = relationship("Learner", back_populates="studies")
