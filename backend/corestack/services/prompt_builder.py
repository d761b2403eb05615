"""
Deterministic prompt templates.

generate_prompt / generate_agent_prompt render project and agent drafts into a
bootstrap prompt; build_style_prompt renders an extracted style system into a
style guide. None of these functions perform I/O and none of them raise for
missing optional fields.

Empty sections of the bootstrap prompts render as "(none)", while the style
guide drops absent optional lines entirely.
"""
from typing import List, Optional

from corestack.schemas import (
    FLOW_SEPARATOR,
    AgentData,
    DesignSystem,
    EntityNode,
    ProjectData,
    StyleSystem,
    TypeLevel,
)

NONE_PLACEHOLDER = "(none)"

PALETTE_SWATCHES = {
    "monochrome": ["#000000", "#ffffff", "#333333"],
    "cyberpunk": ["#000000", "#00ff00", "#ff00ff"],
    "pastel": ["#ffb7b2", "#dac4f7", "#b5ead7"],
    "corporate": ["#0f172a", "#3b82f6", "#64748b"],
    "forest": ["#1a2e1a", "#4ade80", "#166534"],
}

DEFAULT_BACKEND = "Supabase (Postgres + Auth)"
DEFAULT_HOST = "Vercel"

PLATFORM_NOTES = {
    "lovable": "Reuse existing components. Do not invent new colours. Use Tailwind classes derived from the configured theme. Avoid inline styles.",
    "vibe": "Keep classNames consistent. Prefer composition of existing components over duplicating styles.",
    "cursor": "Generate idiomatic React/TSX with clean Tailwind classes. Avoid magic numbers; respect the spacing scale.",
    "generic": "Respect the design system. Do not invent new tokens.",
}

STYLE_GUIDELINES_HEADER = "\n\n---\nSTYLE GUIDELINES\n"


def join_flow(steps: List[str]) -> str:
    return FLOW_SEPARATOR.join(steps)


def split_flow(flow: str) -> List[str]:
    return flow.split(FLOW_SEPARATOR)


def _text(value: Optional[str]) -> str:
    value = (value or "").strip()
    return value if value else NONE_PLACEHOLDER


def _bullets(items: Optional[List[str]], indent: str = "") -> str:
    if not items:
        return f"{indent}{NONE_PLACEHOLDER}"
    return "\n".join(f"{indent}- {item}" for item in items)


def render_entity_tree(nodes: List[EntityNode], depth: int = 0) -> List[str]:
    """One bullet per node, children indented two spaces per level."""
    lines = []
    for node in nodes:
        lines.append(f"{'  ' * depth}- {node.name}")
        lines.extend(render_entity_tree(node.children, depth + 1))
    return lines


def _deployment_section(data: ProjectData) -> str:
    env_keys = [env.key for env in data.env_vars]
    return "\n".join([
        "## Deployment",
        f"- Repository: {data.github_repo.strip()}",
        f"- Platform: {_text(data.deployment_platform)}",
        "- Environment Variables:",
        _bullets(env_keys, indent="  "),
    ])


def _design_system_section(design: DesignSystem) -> str:
    swatches = PALETTE_SWATCHES.get(design.color_palette, [])
    palette = design.color_palette
    if swatches:
        palette = f"{palette} ({', '.join(swatches)})"
    return "\n".join([
        "## Design System",
        f"- Color Palette: {palette}",
        f"- Border Radius: {design.border_radius}",
        f"- Spacing: {design.spacing}",
        f"- Shadows: {design.shadows}",
        f"- Button Style: {design.button_style}",
        f"- Card Style: {design.card_style}",
        f"- Navigation: {design.navigation_style}",
        f"- Mobile First: {'yes' if design.mobile_first else 'no'}",
    ])


def _tech_stack_section(data: ProjectData) -> str:
    backend = (data.backend_stack or "").strip()
    host = (data.deployment_platform or "").strip() or DEFAULT_HOST
    lines = [
        "## Tech Stack (fixed)",
        "- Next.js (App Router)",
        "- TypeScript",
        "- Tailwind CSS",
        f"- {backend} (backend)" if backend else f"- {DEFAULT_BACKEND}",
        f"- {host} (deployment)",
        "- GitHub (repo)",
    ]
    config_code = (data.backend_config_code or "").strip()
    if config_code:
        lines += ["", "### Backend Configuration", "```", config_code, "```"]
    return "\n".join(lines)


def generate_prompt(data: ProjectData) -> str:
    """Render a web-app draft into the bootstrap prompt."""
    backend = (data.backend_stack or "").strip()
    auth_line = (
        f"2. Use {backend} for authentication with email/password login."
        if backend else
        "2. Use Supabase Auth with email/password for login."
    )
    entity_lines = render_entity_tree(data.entities)

    sections = [
        "You are an expert full-stack TypeScript engineer helping me bootstrap a new admin dashboard using my standard CoreStack architecture.",
        "\n".join([
            "## Project Overview",
            f"- Name: {_text(data.project_name)}",
            f"- Summary: {_text(data.project_summary)}",
        ]),
    ]
    if (data.github_repo or "").strip():
        sections.append(_deployment_section(data))
    if data.design_system is not None:
        sections.append(_design_system_section(data.design_system))
    sections += [
        _tech_stack_section(data),
        "## Domain Entities\n" + ("\n".join(entity_lines) if entity_lines else NONE_PLACEHOLDER),
        "## Key Relationships\n" + _bullets(data.relationships),
        "## Core MVP Flows\n" + _bullets(data.flows),
        "## Special Requirements / Notes\n" + _text(data.notes),
        "---",
        "\n".join([
            "# Your Task",
            "",
            "1. Scaffold a reusable admin dashboard shell:",
            "   - Public routes under `app/` (/, /auth/login)",
            "   - Authenticated area under `app/app/*`",
            "   - Protected layout with sidebar + topbar",
            auth_line,
            "3. Use Tailwind for all styling, with clean, minimal UI.",
            "4. Keep dependencies minimal and mainstream (no extra UI libraries).",
            "5. Do **not** build CRUD pages yet - only the shell and auth.",
        ]),
        "\n".join([
            "# Output Format",
            "1. Propose the folder/file structure.",
            "2. Provide `package.json`, Tailwind config, PostCSS config, tsconfig, next.config.",
            "3. Provide full code for:",
            "   - `app/layout.tsx`",
            "   - `app/page.tsx`",
            "   - `app/auth/login/page.tsx`",
            "   - `app/app/layout.tsx`",
            "   - `app/app/page.tsx`",
            "   - Backend client/server helpers in `lib/`.",
            "4. Briefly explain how everything fits together.",
        ]),
    ]
    return "\n\n".join(sections) + "\n"


def generate_agent_prompt(data: AgentData) -> str:
    """Render an agent draft into the bootstrap prompt."""
    output_format = data.output_format if (data.output_format or "").strip() else ""
    sections = [
        "You are an expert AI engineer helping me design and implement an autonomous agent.",
        f"## Agent Overview\n- Name: {_text(data.agent_name)}",
        "## Persona\n" + _text(data.agent_persona),
        "## Triggers\n" + _bullets(data.triggers),
        "## Tools\n" + _bullets(data.tools),
        "## Constraints\n" + _bullets(data.constraints),
        "\n".join([
            "## Output Format",
            "Every agent response must follow this structure:",
            "```json",
            output_format or "{}",
            "```",
        ]),
        "---",
        "\n".join([
            "# Your Task",
            "",
            "1. Write the agent's system prompt from the persona and constraints.",
            "2. Implement a handler for each trigger.",
            "3. Wire up each tool with clear input/output contracts.",
            "4. Validate every response against the output format before returning it.",
            "5. Briefly explain how everything fits together.",
        ]),
    ]
    return "\n\n".join(sections) + "\n"


def _type_line(label: str, level: Optional[TypeLevel]) -> Optional[str]:
    if level is None:
        return None
    return f"- {label}: {level.size}, weight {level.weight}, line-height {level.line_height}"


def _format_number(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_style_prompt(style_system: StyleSystem, target_platform: str = "generic") -> str:
    """
    Render a style system into a style guide for a code-generation tool.

    Section order is fixed so that prompts stay predictable. Optional tokens
    that are not set produce no line at all.
    """
    colors = style_system.colors
    typography = style_system.typography
    radius = style_system.radius

    color_lines = [
        f"- {label}: {value}"
        for label, value in [
            ("primary", colors.primary),
            ("primarySoft", colors.primary_soft),
            ("accent", colors.accent),
            ("background", colors.background),
            ("surface", colors.surface),
            ("border", colors.border),
            ("text", colors.text),
            ("mutedText", colors.muted_text),
            ("success", colors.success),
            ("error", colors.error),
        ]
        if value
    ]

    type_lines = [f"- base font: {typography.font_family_base}"]
    if typography.font_family_heading:
        type_lines.append(f"- heading font: {typography.font_family_heading}")
    scale = typography.scale
    for label, level in [("body", scale.body), ("h1", scale.h1), ("h2", scale.h2), ("h3", scale.h3), ("small", scale.small)]:
        line = _type_line(label, level)
        if line:
            type_lines.append(line)

    sections = [
        ["Use the following design system for all UI in this project."],
        ["COLORS:"] + color_lines,
        ["TYPOGRAPHY:"] + type_lines,
        ["SPACING SCALE (px):"] + ([", ".join(_format_number(v) for v in style_system.spacing_scale)]
                                   if style_system.spacing_scale else []),
    ]

    if radius is not None:
        radius_lines = [
            f"- {label}: {value}"
            for label, value in [("button", radius.button), ("card", radius.card), ("input", radius.input), ("chip", radius.chip)]
            if value
        ]
        if radius_lines:
            sections.append(["RADII:"] + radius_lines)

    if style_system.shadows:
        shadow_lines = [f"- {name}: {value}" for name, value in style_system.shadows.items() if value]
        if shadow_lines:
            sections.append(["SHADOWS:"] + shadow_lines)

    component_lines = []
    for component in style_system.components:
        variants = f" (variants: {', '.join(component.variants)})" if component.variants else ""
        usage = f" Usage: {component.usage}" if component.usage else ""
        component_lines.append(f"- {component.name}{variants}: {component.description.rstrip('.')}.{usage}")
    sections.append(["COMPONENTS:"] + component_lines)

    sections.append(["STYLE PRINCIPLES:"] + [f"- {p}" for p in style_system.principles if p])

    sections.append([
        "GUIDELINES:",
        "- Never invent new colours; only use the tokens defined above.",
        "- Reuse existing components instead of recreating similar ones.",
        "- Use the spacing scale values; avoid arbitrary pixel values.",
        "- Maintain visual consistency between screens (same card and button treatments).",
        f"- {PLATFORM_NOTES.get(target_platform, PLATFORM_NOTES['generic'])}",
    ])

    return "\n\n".join("\n".join(section) for section in sections)


def compose_prompt(base_prompt: str, style_context=None) -> str:
    """Append the active style guide, if any, to a rendered bootstrap prompt."""
    if style_context is None:
        return base_prompt
    _, style_prompt = style_context.get()
    if not style_prompt:
        return base_prompt
    return f"{base_prompt.rstrip()}{STYLE_GUIDELINES_HEADER}{style_prompt}"
