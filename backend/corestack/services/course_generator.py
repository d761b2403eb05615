"""
Course generation for a learning topic.

The model output is validated into a GeneratedCourse before anything touches
the database; persist_course writes the course, its modules and lessons in a
single transaction.
"""
import logging
from typing import Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from corestack import models
from corestack.schemas import GeneratedCourse
from corestack.services.llm_client import GeminiClient
from corestack.services.response_parser import parse_course

logger = logging.getLogger(__name__)

COURSE_SYSTEM_PROMPT = """
You are an expert curriculum designer and technical educator. Your goal is to create a structured, high-quality learning course based on a given topic.

The output must be a valid JSON object matching the following structure:
{
  "title": "Course Title",
  "short_summary": "Brief overview of the course",
  "difficulty": "basic" | "intermediate" | "advanced",
  "estimated_total_minutes": 120,
  "modules": [
    {
      "title": "Module Title",
      "summary": "Module summary",
      "lessons": [
        {
          "title": "Lesson Title",
          "objective": "What the student will learn",
          "key_points": ["Point 1", "Point 2"],
          "estimated_minutes": 15,
          "practice_task": "A hands-on exercise",
          "quiz_question": "A question to test understanding"
        }
      ]
    }
  ]
}

- Break the topic down into logical modules. Every module has at least one lesson.
- Ensure lessons are bite-sized and actionable.
- The tone should be encouraging but technical and precise.
- For "practice_task", provide a concrete thing the user can do (e.g., "Write a function that...", "Create a file named...").
- Return ONLY the JSON object.
""".strip()


def build_course_prompt(topic: models.LearningTopic) -> str:
    return "\n".join([
        f"Topic: {topic.title}",
        f"Description: {topic.description or 'No description provided'}",
        f"Context: {topic.context_area or 'General'}",
        f"Difficulty: {topic.difficulty}",
        "",
        "Generate a comprehensive course for this topic.",
    ])


def generate_course(llm: GeminiClient, topic: models.LearningTopic) -> Tuple[GeneratedCourse, str]:
    """Returns the validated course and the topic prompt it was generated from."""
    prompt = build_course_prompt(topic)
    logger.info(f"Generating course for topic {topic.id} ({topic.title})")
    text = llm.generate([COURSE_SYSTEM_PROMPT, prompt], json_output=True, use_fallback=False)
    return parse_course(text), prompt


def persist_course(
    db: Session,
    topic: models.LearningTopic,
    course: GeneratedCourse,
    source_prompt: str,
) -> models.Course:
    db_course = models.Course(
        learning_topic_id=topic.id,
        title=course.title,
        short_summary=course.short_summary,
        difficulty=course.difficulty,
        estimated_total_minutes=course.estimated_total_minutes,
        status="active",
        source_prompt=source_prompt,
    )
    for module_index, module in enumerate(course.modules):
        db_module = models.CourseModule(
            order_index=module_index,
            title=module.title,
            summary=module.summary,
        )
        for lesson_index, lesson in enumerate(module.lessons):
            db_module.lessons.append(models.CourseLesson(
                order_index=lesson_index,
                title=lesson.title,
                objective=lesson.objective,
                key_points=list(lesson.key_points),
                estimated_minutes=lesson.estimated_minutes,
                practice_task=lesson.practice_task,
                quiz_question=lesson.quiz_question,
            ))
        db_course.modules.append(db_module)

    try:
        db.add(db_course)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to persist course for topic {topic.id}: {e}")
        raise

    db.refresh(db_course)
    logger.info(f"Persisted course {db_course.id} with {len(course.modules)} modules")
    return db_course
