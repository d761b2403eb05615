import uuid
from datetime import datetime
from typing import Optional, Dict, Any, Union, List, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

FLOW_SEPARATOR = " -> "

COMPONENT_NAMES = ("Button", "Card", "Input", "Navbar", "Modal", "Alert")

TargetPlatform = Literal["lovable", "vibe", "cursor", "generic"]
ExtractionMode = Literal["css", "description", "image"]
ComponentName = Literal["Button", "Card", "Input", "Navbar", "Modal", "Alert"]
Difficulty = Literal["basic", "intermediate", "advanced"]
ProjectType = Literal["WEB_APP", "AGENT"]


def new_node_id() -> str:
    return uuid.uuid4().hex[:9]


class CamelModel(BaseModel):
    """Wire models use camelCase keys; snake_case is accepted on input too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class UserBase(BaseModel):
    email: EmailStr
    username: str

class UserCreate(UserBase):
    password: str
    repeat_password: str

class UserResponse(UserBase):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str

class TokenData(BaseModel):
    email: Optional[str] = None

class RefreshRequest(BaseModel):
    refresh_token: str


# ---------------------------------------------------------------------------
# Project / agent data
# ---------------------------------------------------------------------------

class EntityNode(CamelModel):
    id: str = Field(default_factory=new_node_id)
    name: str
    children: List["EntityNode"] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        # models and older clients sometimes send numeric or null ids
        if value is None or value == "":
            return new_node_id()
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("children", mode="before")
    @classmethod
    def null_children(cls, value):
        return [] if value is None else value


EntityNode.model_rebuild()


def walk_entities(nodes: List[EntityNode]):
    """Yield every node of a forest, depth first."""
    for node in nodes:
        yield node
        yield from walk_entities(node.children)


class EnvVar(CamelModel):
    id: str = Field(default_factory=new_node_id)
    key: str
    value: str = ""


class DesignSystem(CamelModel):
    color_palette: Literal["monochrome", "cyberpunk", "pastel", "corporate", "forest"] = "monochrome"
    border_radius: Literal["square", "rounded", "pill"] = "square"
    spacing: Literal["tight", "comfy", "airy"] = "comfy"
    shadows: Literal["flat", "soft", "hard"] = "flat"
    button_style: Literal["solid", "outline", "ghost"] = "solid"
    card_style: Literal["border", "elevated", "flat"] = "border"
    navigation_style: Literal["sticky", "floating", "sidebar"] = "sticky"
    mobile_first: bool = True


class ProjectData(CamelModel):
    project_name: str = ""
    project_summary: str = ""
    entities: List[EntityNode] = Field(default_factory=list)
    relationships: List[str] = Field(default_factory=list)
    flows: List[str] = Field(default_factory=list)
    notes: str = ""
    github_repo: Optional[str] = ""
    deployment_platform: Optional[str] = ""
    backend_stack: Optional[str] = ""
    backend_config_code: Optional[str] = ""
    env_vars: List[EnvVar] = Field(default_factory=list)
    design_system: Optional[DesignSystem] = None

    @model_validator(mode="after")
    def unique_entity_ids(self):
        seen = set()
        for node in walk_entities(self.entities):
            if node.id in seen:
                raise ValueError(f"duplicate entity id: {node.id}")
            seen.add(node.id)
        return self


class AgentData(CamelModel):
    agent_name: str = ""
    agent_persona: str = ""
    triggers: List[str] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)
    constraints: List[str] = Field(default_factory=list)
    output_format: str = ""


class ProjectSkeleton(CamelModel):
    """Draft project produced by magic fill. Missing fields stay None."""
    project_name: Optional[str] = None
    project_summary: Optional[str] = None
    entities: Optional[List[EntityNode]] = None
    relationships: Optional[List[str]] = None
    flows: Optional[List[str]] = None

    @field_validator("flows", mode="before")
    @classmethod
    def join_step_lists(cls, value):
        # a flow given as a list of steps is joined into the "A -> B" form
        if isinstance(value, list):
            return [FLOW_SEPARATOR.join(str(step) for step in item) if isinstance(item, list) else item
                    for item in value]
        return value


# ---------------------------------------------------------------------------
# Style system
# ---------------------------------------------------------------------------

class TokenModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)


class ColorTokens(TokenModel):
    primary: str
    primary_soft: Optional[str] = None
    accent: Optional[str] = None
    background: str
    surface: Optional[str] = None
    border: Optional[str] = None
    text: str
    muted_text: Optional[str] = None
    success: Optional[str] = None
    error: Optional[str] = None


class TypeLevel(TokenModel):
    size: str
    weight: Union[int, str]
    line_height: Union[int, float, str]


class TypeScale(TokenModel):
    h1: Optional[TypeLevel] = None
    h2: Optional[TypeLevel] = None
    h3: Optional[TypeLevel] = None
    body: TypeLevel
    small: Optional[TypeLevel] = None


class TypographyScale(TokenModel):
    font_family_base: str
    font_family_heading: Optional[str] = None
    scale: TypeScale


class RadiusTokens(TokenModel):
    button: Optional[str] = None
    card: Optional[str] = None
    input: Optional[str] = None
    chip: Optional[str] = None


class StyleComponent(TokenModel):
    name: ComponentName
    variants: Optional[List[str]] = None
    description: str
    usage: Optional[str] = None


class StyleSystem(TokenModel):
    colors: ColorTokens
    typography: TypographyScale
    spacing_scale: List[Union[int, float]] = Field(default_factory=list)
    radius: Optional[RadiusTokens] = None
    shadows: Optional[Dict[str, str]] = None
    components: List[StyleComponent] = Field(default_factory=list)
    principles: List[str] = Field(default_factory=list)

    @field_validator("components")
    @classmethod
    def one_entry_per_name(cls, value: List[StyleComponent]):
        names = [component.name for component in value]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate component entries: {', '.join(duplicates)}")
        return value


class ComponentContext(TokenModel):
    """A previously detected component observation used to bias generation."""
    name: Optional[str] = None
    variants: Optional[List[str]] = None
    description: Optional[str] = None
    usage: Optional[str] = None


# ---------------------------------------------------------------------------
# Course generation (snake_case on the wire)
# ---------------------------------------------------------------------------

class GeneratedLesson(BaseModel):
    title: str
    objective: str
    key_points: List[str]
    estimated_minutes: int
    practice_task: str
    quiz_question: str


class GeneratedModule(BaseModel):
    title: str
    summary: str
    lessons: List[GeneratedLesson] = Field(min_length=1)


class GeneratedCourse(BaseModel):
    title: str
    short_summary: str
    difficulty: Difficulty
    estimated_total_minutes: int
    modules: List[GeneratedModule] = Field(min_length=1)


# ---------------------------------------------------------------------------
# Requests / responses
# ---------------------------------------------------------------------------

class GenerateFromIdeaRequest(BaseModel):
    prompt: Optional[str] = None

class StyleAnalyseRequest(CamelModel):
    mode: Optional[str] = None
    target_platform: TargetPlatform = "generic"
    source: Optional[str] = None

class StyleAnalyseResponse(CamelModel):
    style_system: StyleSystem
    style_prompt: str

class ComponentRequest(CamelModel):
    style_system: Optional[StyleSystem] = None
    component_name: Optional[str] = None
    component_context: Optional[ComponentContext] = None
    user_instruction: Optional[str] = None

class ComponentResponse(BaseModel):
    code: str

class GenerateCourseRequest(CamelModel):
    topic_id: Optional[int] = None

class GenerateCourseResponse(CamelModel):
    course_id: int

class RenderOptions(CamelModel):
    style_system: Optional[StyleSystem] = None
    style_prompt: Optional[str] = None
    target_platform: TargetPlatform = "generic"

class ProjectPromptRequest(RenderOptions):
    project: ProjectData

class AgentPromptRequest(RenderOptions):
    agent: AgentData

class PromptResponse(BaseModel):
    prompt: str

class DraftCreate(BaseModel):
    type: ProjectType = "WEB_APP"

class DraftUpdate(BaseModel):
    data: Dict[str, Any]

class DraftMetadata(CamelModel):
    id: str
    name: str
    type: ProjectType
    last_modified: Optional[datetime] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

class DraftResponse(BaseModel):
    metadata: DraftMetadata
    data: Dict[str, Any]

class MagicFillRequest(BaseModel):
    prompt: Optional[str] = None

class TopicCreate(CamelModel):
    title: str
    description: Optional[str] = None
    context_area: Optional[str] = None
    difficulty: Difficulty = "basic"
    priority: Literal["low", "medium", "high"] = "medium"

class TopicResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    context_area: Optional[str] = None
    difficulty: str
    status: str
    priority: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class CourseSummary(BaseModel):
    id: int
    learning_topic_id: int
    title: str
    short_summary: str
    difficulty: str
    estimated_total_minutes: int
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class TopicDetail(TopicResponse):
    courses: List[CourseSummary] = Field(default_factory=list)

class LessonResponse(BaseModel):
    id: int
    order_index: int
    title: str
    objective: str
    key_points: List[str]
    estimated_minutes: int
    practice_task: str
    quiz_question: str

    model_config = ConfigDict(from_attributes=True)

class ModuleResponse(BaseModel):
    id: int
    order_index: int
    title: str
    summary: str
    lessons: List[LessonResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

class CourseDetail(CourseSummary):
    source_prompt: Optional[str] = None
    modules: List[ModuleResponse] = Field(default_factory=list)
