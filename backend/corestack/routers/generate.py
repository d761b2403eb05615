from fastapi import APIRouter, Depends
from corestack import schemas
from corestack.services.llm_client import GeminiClient, get_llm_client
from corestack.services.magic_fill import generate_project_skeleton

router = APIRouter(prefix="/api", tags=["generate"])

@router.post("/generate", response_model=schemas.ProjectSkeleton, response_model_exclude_none=True)
def generate_from_idea(
    request: schemas.GenerateFromIdeaRequest,
    llm: GeminiClient = Depends(get_llm_client)
):
    """Expand a one-line project idea into a project skeleton (no persistence)."""
    return generate_project_skeleton(llm, request.prompt)
