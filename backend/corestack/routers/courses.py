import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from corestack import models, schemas
from corestack.auth import get_current_user
from corestack.database import get_db
from corestack.services.course_generator import generate_course, persist_course
from corestack.services.llm_client import GeminiClient, get_llm_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["learning"])

@router.post("/generate-course", response_model=schemas.GenerateCourseResponse)
def generate_course_for_topic(
    request: schemas.GenerateCourseRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
    llm: GeminiClient = Depends(get_llm_client)
):
    if not request.topic_id:
        raise HTTPException(status_code=400, detail="Topic ID is required")

    topic = db.query(models.LearningTopic).filter(
        models.LearningTopic.id == request.topic_id,
        models.LearningTopic.user_id == current_user.id
    ).first()
    if topic is None:
        raise HTTPException(status_code=404, detail="Topic not found")

    course, source_prompt = generate_course(llm, topic)
    db_course = persist_course(db, topic, course, source_prompt)
    return {"course_id": db_course.id}
