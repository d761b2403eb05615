import logging
from typing import Optional
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from corestack.services.llm_client import GeminiClient, get_optional_llm_client
from corestack.services.settings_loader import get_api_key_source, get_diagnostic_models, get_setting

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["diagnostics"])

@router.get("/diagnostics")
def diagnostics(llm: Optional[GeminiClient] = Depends(get_optional_llm_client)):
    """Report which credential is configured and whether each candidate model answers."""
    report = {
        "env": {
            "GOOGLE_API_KEY_PRESENT": get_setting("GOOGLE_API_KEY") is not None,
            "GEMINI_API_KEY_PRESENT": get_setting("GEMINI_API_KEY") is not None,
            "ACTIVE_KEY_SOURCE": get_api_key_source() or "NONE",
        },
        "models": [],
        "error": None,
    }

    if llm is None:
        report["error"] = "No API key found in environment variables."
        return JSONResponse(status_code=500, content=report)

    report["models"] = llm.check_models(get_diagnostic_models())
    if not any(check["ok"] for check in report["models"]):
        report["error"] = "Every model check failed."
        logger.error(f"Diagnostics: no model answered ({report['models']})")
        return JSONResponse(status_code=500, content=report)
    return report
