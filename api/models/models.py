from api.config import Base
from sqlalchemy import Column, Integer, String, JSON, DateTime, Date, ForeignKey, Text, Boolean, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime

ROLE_TECHNICIAN = "technician"
ROLE_MANAGER = "manager"


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True)
    full_name = Column(String, nullable=False, default="User")
    hashed_password = Column(String)
    role = Column(String, nullable=False, default=ROLE_TECHNICIAN)  # technician|manager
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class TrainingModule(Base):
    __tablename__ = "training_modules"
    id = Column(String, primary_key=True, index=True)  # uuid
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)
    order_index = Column(Integer, nullable=False, default=0)
    duration_minutes = Column(Integer, nullable=True)
    content = Column(Text, nullable=True)  # markdown
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    questions = relationship("QuizQuestion", backref="module", cascade="all, delete-orphan")
    open_ended_questions = relationship("OpenEndedQuestion", backref="module", cascade="all, delete-orphan")
    progress = relationship("ModuleProgress", backref="module", cascade="all, delete-orphan")


class ModuleProgress(Base):
    __tablename__ = "user_progress"
    __table_args__ = (UniqueConstraint("user_id", "module_id", name="uq_user_progress_user_module"),)
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    module_id = Column(String, ForeignKey("training_modules.id"), index=True, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    progress_percentage = Column(Integer, default=0, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    last_accessed_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", backref="module_progress", foreign_keys=[user_id])


class QuizQuestion(Base):
    __tablename__ = "quiz_questions"
    id = Column(String, primary_key=True, index=True)  # uuid
    module_id = Column(String, ForeignKey("training_modules.id"), index=True, nullable=False)
    order_index = Column(Integer, nullable=False, default=0)
    prompt = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)  # list[str]
    correct_answer = Column(Text, nullable=False)  # option text, not index


class CompetencyRecord(Base):
    __tablename__ = "competency_records"
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    # Explicit module link; NULL for legacy rows matched by name
    module_id = Column(String, ForeignKey("training_modules.id", ondelete="SET NULL"), index=True, nullable=True)
    competency_name = Column(String, nullable=False)
    score = Column(Integer, nullable=False)  # 0..100
    assessed_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    notes = Column(Text, nullable=True)

    user = relationship("User", backref="competency_records", foreign_keys=[user_id])


class OpenEndedQuestion(Base):
    __tablename__ = "open_ended_questions"
    id = Column(String, primary_key=True, index=True)  # uuid
    module_id = Column(String, ForeignKey("training_modules.id"), index=True, nullable=False)
    question = Column(Text, nullable=False)
    good_answer_criteria = Column(Text, nullable=False)
    medium_answer_criteria = Column(Text, nullable=False)
    bad_answer_criteria = Column(Text, nullable=False)
    order_index = Column(Integer, nullable=False, default=0)


class OpenEndedResponse(Base):
    __tablename__ = "open_ended_responses"
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    question_id = Column(String, ForeignKey("open_ended_questions.id"), index=True, nullable=False)
    module_id = Column(String, ForeignKey("training_modules.id"), index=True, nullable=False)
    answer = Column(Text, nullable=False)
    ai_grade = Column(String, nullable=True)  # good|medium|bad
    ai_feedback = Column(Text, nullable=True)
    submitted_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    graded_at = Column(DateTime, nullable=True)

    user = relationship("User", foreign_keys=[user_id])
    question = relationship("OpenEndedQuestion", foreign_keys=[question_id])


class Certification(Base):
    __tablename__ = "certifications"
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    certification_name = Column(String, nullable=False)
    issue_date = Column(Date, nullable=False)
    expiration_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", backref="certifications", foreign_keys=[user_id])


class ConsultationMessage(Base):
    __tablename__ = "consultation_messages"
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    message = Column(Text, nullable=False)
    is_ai_response = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class TechnicianGroup(Base):
    __tablename__ = "technician_groups"
    id = Column(String, primary_key=True, index=True)  # uuid
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    members = relationship("GroupMembership", backref="group", cascade="all, delete-orphan")


class GroupMembership(Base):
    __tablename__ = "group_memberships"
    __table_args__ = (UniqueConstraint("group_id", "user_id", name="uq_group_membership"),)
    id = Column(String, primary_key=True, index=True)  # uuid
    group_id = Column(String, ForeignKey("technician_groups.id"), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
