from datetime import datetime
from typing import List, Union
import logging
import uuid
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from corestack import models, schemas
from corestack.auth import get_current_user
from corestack.database import get_db
from corestack.routers.prompts import render_prompt
from corestack.services.llm_client import GeminiClient, get_llm_client
from corestack.services.magic_fill import generate_project_skeleton, merge_project_skeleton

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])

UNTITLED_NAMES = {"WEB_APP": "Untitled Project", "AGENT": "Untitled Agent"}

def default_draft_data(project_type: str) -> Union[schemas.ProjectData, schemas.AgentData]:
    if project_type == "WEB_APP":
        return schemas.ProjectData(project_name=UNTITLED_NAMES["WEB_APP"], design_system=schemas.DesignSystem())
    return schemas.AgentData(agent_name=UNTITLED_NAMES["AGENT"])

def parse_draft_data(project_type: str, data: dict) -> Union[schemas.ProjectData, schemas.AgentData]:
    model_cls = schemas.ProjectData if project_type == "WEB_APP" else schemas.AgentData
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        messages = [f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in e.errors()]
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=messages)

def draft_name(project_type: str, data: Union[schemas.ProjectData, schemas.AgentData]) -> str:
    name = data.project_name if project_type == "WEB_APP" else data.agent_name
    return (name or "").strip() or UNTITLED_NAMES[project_type]

def store_draft_data(draft: models.ProjectDraft, data: Union[schemas.ProjectData, schemas.AgentData]):
    draft.data = data.model_dump(mode="json", by_alias=True)
    draft.name = draft_name(draft.type, data)
    draft.last_modified = datetime.utcnow()

def draft_response(draft: models.ProjectDraft) -> dict:
    return {"metadata": schemas.DraftMetadata.model_validate(draft), "data": draft.data}

def get_owned_draft(draft_id: str, current_user: models.User, db: Session) -> models.ProjectDraft:
    draft = db.query(models.ProjectDraft).filter(
        models.ProjectDraft.id == draft_id,
        models.ProjectDraft.user_id == current_user.id
    ).first()
    if draft is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return draft

@router.post("/", response_model=schemas.DraftResponse)
def create_draft(
    draft_in: schemas.DraftCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    draft = models.ProjectDraft(id=str(uuid.uuid4()), user_id=current_user.id, type=draft_in.type)
    store_draft_data(draft, default_draft_data(draft_in.type))
    db.add(draft)
    db.commit()
    db.refresh(draft)
    logger.info(f"Created {draft.type} draft {draft.id} for user {current_user.id}")
    return draft_response(draft)

@router.get("/", response_model=List[schemas.DraftMetadata])
def list_drafts(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return db.query(models.ProjectDraft).filter(
        models.ProjectDraft.user_id == current_user.id
    ).order_by(models.ProjectDraft.last_modified.desc()).all()

@router.get("/{draft_id}", response_model=schemas.DraftResponse)
def read_draft(
    draft_id: str,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return draft_response(get_owned_draft(draft_id, current_user, db))

@router.put("/{draft_id}", response_model=schemas.DraftResponse)
def update_draft(
    draft_id: str,
    draft_update: schemas.DraftUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    draft = get_owned_draft(draft_id, current_user, db)
    store_draft_data(draft, parse_draft_data(draft.type, draft_update.data))
    db.commit()
    db.refresh(draft)
    return draft_response(draft)

@router.delete("/{draft_id}")
def delete_draft(
    draft_id: str,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    draft = get_owned_draft(draft_id, current_user, db)
    db.delete(draft)
    db.commit()
    return {"message": "Project deleted successfully"}

@router.post("/{draft_id}/prompt", response_model=schemas.PromptResponse)
def render_draft_prompt(
    draft_id: str,
    options: schemas.RenderOptions,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    draft = get_owned_draft(draft_id, current_user, db)
    return {"prompt": render_prompt(parse_draft_data(draft.type, draft.data), options)}

@router.post("/{draft_id}/magic-fill", response_model=schemas.DraftResponse)
def magic_fill_draft(
    draft_id: str,
    request: schemas.MagicFillRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
    llm: GeminiClient = Depends(get_llm_client)
):
    draft = get_owned_draft(draft_id, current_user, db)
    if draft.type != "WEB_APP":
        raise HTTPException(status_code=400, detail="Magic fill is only available for web app projects")

    existing = parse_draft_data(draft.type, draft.data)
    # nothing is written unless generation and merge both succeed
    skeleton = generate_project_skeleton(llm, request.prompt)
    store_draft_data(draft, merge_project_skeleton(existing, skeleton))
    db.commit()
    db.refresh(draft)
    return draft_response(draft)
