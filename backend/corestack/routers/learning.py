from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from corestack import models, schemas
from corestack.auth import get_current_user
from corestack.database import get_db

router = APIRouter(prefix="/api/learning", tags=["learning"])

@router.post("/topics", response_model=schemas.TopicResponse)
def create_topic(
    topic: schemas.TopicCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    db_topic = models.LearningTopic(**topic.model_dump(), user_id=current_user.id, status="idea")
    db.add(db_topic)
    db.commit()
    db.refresh(db_topic)
    return db_topic

@router.get("/topics", response_model=List[schemas.TopicResponse])
def read_topics(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return db.query(models.LearningTopic).filter(
        models.LearningTopic.user_id == current_user.id
    ).order_by(models.LearningTopic.created_at.desc(), models.LearningTopic.id.desc()).all()

@router.get("/topics/{topic_id}", response_model=schemas.TopicDetail)
def read_topic(
    topic_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    topic = db.query(models.LearningTopic).filter(
        models.LearningTopic.id == topic_id,
        models.LearningTopic.user_id == current_user.id
    ).first()
    if topic is None:
        raise HTTPException(status_code=404, detail="Topic not found")
    return topic

@router.get("/courses/{course_id}", response_model=schemas.CourseDetail)
def read_course(
    course_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    course = db.query(models.Course).join(models.LearningTopic).filter(
        models.Course.id == course_id,
        models.LearningTopic.user_id == current_user.id
    ).first()
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return course
