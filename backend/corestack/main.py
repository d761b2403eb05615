from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from corestack.exceptions import CoreStackError, InvalidInput, MalformedModelOutput, SchemaValidationError
from corestack.routers import auth, courses, diagnostics, generate, learning, projects, prompts, style
from corestack.services.settings_loader import get_cors_origins
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="CoreStack Prompt Builder API", version="1.0.0")

@app.exception_handler(CoreStackError)
async def corestack_exception_handler(request: Request, exc: CoreStackError):
    status_code = status.HTTP_400_BAD_REQUEST if isinstance(exc, InvalidInput) else status.HTTP_500_INTERNAL_SERVER_ERROR
    content = {"detail": exc.message, "error": exc.kind}
    if isinstance(exc, MalformedModelOutput):
        content["excerpt"] = exc.excerpt
    if isinstance(exc, SchemaValidationError):
        content["errors"] = exc.errors
    if status_code >= 500:
        logger.error(f"{exc.kind} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"Rejected request to {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status_code, content=content)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": messages, "error": "invalid_input"}
    )

# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "error": str(exc),
            "path": str(request.url)
        }
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(projects.router)
app.include_router(prompts.router)
app.include_router(generate.router)
app.include_router(style.router)
app.include_router(courses.router)
app.include_router(learning.router)
app.include_router(diagnostics.router)

@app.get("/")
def read_root():
    return {"message": "CoreStack Prompt Builder API"}

@app.get("/api/health")
def health_check():
    return {"status": "healthy"}
