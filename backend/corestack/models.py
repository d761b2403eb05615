from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from corestack.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    drafts = relationship("ProjectDraft", back_populates="owner", cascade="all, delete-orphan")
    topics = relationship("LearningTopic", back_populates="owner", cascade="all, delete-orphan")
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")

class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, index=True)
    token = Column(String, unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    revoked = Column(Integer, default=0)  # 0 = active, 1 = revoked

    user = relationship("User", back_populates="refresh_tokens")

class ProjectDraft(Base):
    """A web-app or agent draft, stored as a JSON blob keyed by a generated id."""
    __tablename__ = "project_drafts"

    id = Column(String(36), primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)  # 'WEB_APP' or 'AGENT'
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_modified = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="drafts")

class LearningTopic(Base):
    __tablename__ = "learning_topics"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    context_area = Column(String, nullable=True)
    difficulty = Column(String, nullable=False, default="basic")  # basic, intermediate, advanced
    status = Column(String, nullable=False, default="idea")  # idea, in_progress, completed
    priority = Column(String, nullable=False, default="medium")  # low, medium, high
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User", back_populates="topics")
    courses = relationship("Course", back_populates="topic", cascade="all, delete-orphan")

class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    learning_topic_id = Column(Integer, ForeignKey("learning_topics.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    short_summary = Column(Text, nullable=False)
    difficulty = Column(String, nullable=False)
    estimated_total_minutes = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default="active")
    source_prompt = Column(Text, nullable=True)  # prompt the course was generated from
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    topic = relationship("LearningTopic", back_populates="courses")
    modules = relationship(
        "CourseModule",
        back_populates="course",
        order_by="CourseModule.order_index",
        cascade="all, delete-orphan",
    )

class CourseModule(Base):
    __tablename__ = "course_modules"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    order_index = Column(Integer, nullable=False)
    title = Column(String, nullable=False)
    summary = Column(Text, nullable=False)

    course = relationship("Course", back_populates="modules")
    lessons = relationship(
        "CourseLesson",
        back_populates="module",
        order_by="CourseLesson.order_index",
        cascade="all, delete-orphan",
    )

class CourseLesson(Base):
    __tablename__ = "course_lessons"

    id = Column(Integer, primary_key=True, index=True)
    module_id = Column(Integer, ForeignKey("course_modules.id"), nullable=False, index=True)
    order_index = Column(Integer, nullable=False)
    title = Column(String, nullable=False)
    objective = Column(Text, nullable=False)
    key_points = Column(JSON, nullable=False)  # ordered list of strings
    estimated_minutes = Column(Integer, nullable=False)
    practice_task = Column(Text, nullable=False)
    quiz_question = Column(Text, nullable=False)

    module = relationship("CourseModule", back_populates="lessons")
