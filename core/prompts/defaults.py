"""
Built-in presets shipped with the application.

The set is built once at import into a read-only mapping. Built-ins are never
persisted; a custom preset with the same id overrides one in the catalog.
"""
from types import MappingProxyType
from typing import Mapping

from core.prompts.models import Preset, PresetExample

GENERAL = Preset(
    id="general",
    name="General Enhancement",
    description="Structure any prompt with clear objectives, context, and constraints",
    tags=("general", "structure", "clarity"),
    is_built_in=True,
    system_prompt="""You are a Prompt Enhancement Expert. Your job is to take a user's rough prompt and transform it into a clear, structured, and effective prompt.

ALWAYS structure your response with these sections:

# Objective
[Clear, specific goal of what the user wants to achieve]

# Context
[Relevant background information and constraints]

# Format & Style
[Specify desired output format, tone ({{style|clear and professional}}), length, etc.]

# Success Criteria
[How to know if the response meets the requirements]

Transform the following prompt:

{{input}}""",
    examples=(
        PresetExample(
            input="Write about dogs",
            expected_output=(
                "# Objective\nCreate an informative article about dogs that covers their "
                "characteristics, breeds, and care\n\n# Context\nTarget audience: Pet owners and "
                "dog enthusiasts\nTone: Friendly and informative\n\n# Format & Style\nArticle "
                "format, 800-1000 words, with clear headings and bullet points for key "
                "information\n\n# Success Criteria\n- Covers different dog breeds\n- Includes "
                "care tips\n- Easy to read and engaging"
            ),
            description="General topic enhancement",
        ),
    ),
)

IMAGES = Preset(
    id="images",
    name="Image Generation",
    description="Optimize prompts for image generation models (Midjourney, FLUX, Stable Diffusion)",
    tags=("images", "visual", "art", "generation"),
    is_built_in=True,
    system_prompt="""You are an expert at creating prompts for image generation AI models like Midjourney, FLUX, and Stable Diffusion.

Transform the user's prompt into a structured format with these elements:

**Subject:** [Main focus of the image]
**Style:** [Art style, technique, or aesthetic]
**Composition:** [Framing, perspective, layout]
**Lighting:** [Type and quality of lighting]
**Color:** [Color palette and mood]
**Details:** [Specific elements, textures, effects]
**Camera/Lens:** [If photographic style]
**Quality Tags:** [Technical quality descriptors]

**Negative Prompt:** [What to avoid in the image]

Make it detailed but concise. Focus on visual elements that AI can understand.

Transform this prompt:

{{input}}""",
    examples=(
        PresetExample(
            input="A beautiful sunset",
            expected_output=(
                "**Subject:** Dramatic sunset landscape with silhouetted mountains\n"
                "**Style:** Photorealistic, cinematic\n"
                "**Composition:** Wide landscape shot, rule of thirds\n"
                "**Lighting:** Golden hour, warm backlighting, dramatic sky\n"
                "**Color:** Vibrant oranges, deep purples, golden yellows\n"
                "**Details:** Layered mountain silhouettes, scattered clouds, atmospheric haze\n"
                "**Camera/Lens:** Wide-angle landscape photography, sharp focus\n"
                "**Quality Tags:** High resolution, professional photography, award-winning\n\n"
                "**Negative Prompt:** blurry, low quality, oversaturated, artificial"
            ),
            description="Landscape image enhancement",
        ),
    ),
)

CODE = Preset(
    id="code",
    name="Code & Technical",
    description="Optimize prompts for coding assistance and technical tasks",
    tags=("code", "programming", "technical", "development"),
    is_built_in=True,
    system_prompt="""You are a technical prompt specialist. Transform user requests into clear, specific technical prompts that will get better results from coding assistants.

Structure your response with:

# Technical Objective
[Specific programming goal]

# Technology Stack
[Languages, frameworks, versions, tools]

# Requirements
[Functional and technical requirements]

# Expected Output
[Code format: complete file, snippet, explanation, tests, etc.]

# Constraints & Considerations
[Performance, security, best practices, edge cases]

# Context
[Additional background if needed]

Be specific about versions, patterns, and implementation details.

Transform this technical request:

{{input}}""",
    examples=(
        PresetExample(
            input="Help me with React",
            expected_output=(
                "# Technical Objective\nCreate a reusable React component with proper "
                "TypeScript types\n\n# Technology Stack\n- React 18+\n- TypeScript 4.9+\n"
                "- Modern functional components with hooks\n\n# Requirements\n- Component "
                "should be properly typed\n- Include prop validation\n- Handle loading and "
                "error states\n\n# Expected Output\n- Complete component code\n- TypeScript "
                "interface definitions\n- Usage example\n\n# Constraints & Considerations\n"
                "- Accessibility compliance\n- Error boundary compatibility"
            ),
            description="React component request enhancement",
        ),
    ),
)

# Order here is the order built-ins are listed in the catalog
BUILT_IN_PRESETS: Mapping[str, Preset] = MappingProxyType({
    preset.id: preset for preset in (GENERAL, IMAGES, CODE)
})

# Sample values used when previewing a template in an editor
PREVIEW_INPUTS = MappingProxyType({
    "input": "Sample input text",
    "topic": "example topic",
    "style": "professional",
})
