from typing import Union
from fastapi import APIRouter
from corestack import schemas
from corestack.services.prompt_builder import compose_prompt, generate_agent_prompt, generate_prompt
from corestack.services.style_context import StyleContext

router = APIRouter(prefix="/api/prompts", tags=["prompts"])

def render_prompt(data: Union[schemas.ProjectData, schemas.AgentData], options: schemas.RenderOptions) -> str:
    """Render a draft with the matching template and append the requested style guide."""
    if isinstance(data, schemas.AgentData):
        base_prompt = generate_agent_prompt(data)
    else:
        base_prompt = generate_prompt(data)
    return compose_prompt(base_prompt, StyleContext.from_options(options))

@router.post("/project", response_model=schemas.PromptResponse)
def render_project_prompt(request: schemas.ProjectPromptRequest):
    return {"prompt": render_prompt(request.project, request)}

@router.post("/agent", response_model=schemas.PromptResponse)
def render_agent_prompt(request: schemas.AgentPromptRequest):
    return {"prompt": render_prompt(request.agent, request)}
