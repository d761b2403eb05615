from fastapi import APIRouter, Depends
from corestack import schemas
from corestack.services.component_synthesis import generate_component_code
from corestack.services.llm_client import GeminiClient, get_llm_client
from corestack.services.style_extraction import analyse_style

router = APIRouter(prefix="/api/style", tags=["style"])

@router.post("/analyse", response_model=schemas.StyleAnalyseResponse, response_model_exclude_none=True)
def analyse(
    request: schemas.StyleAnalyseRequest,
    llm: GeminiClient = Depends(get_llm_client)
):
    style_system, style_prompt = analyse_style(llm, request.mode, request.source, request.target_platform)
    return {"style_system": style_system, "style_prompt": style_prompt}

@router.post("/generate-component", response_model=schemas.ComponentResponse)
def generate_component(
    request: schemas.ComponentRequest,
    llm: GeminiClient = Depends(get_llm_client)
):
    code = generate_component_code(
        llm,
        request.style_system,
        request.component_name,
        component_context=request.component_context,
        user_instruction=request.user_instruction,
    )
    return {"code": code}
