"""Expert Advisor generation package."""

from .common import (
    DOWNLOAD_FILENAME,
    GENERATION_MODEL,
    NO_CODE_PLACEHOLDER,
    REASONING_EFFORT,
    get_openai_api_key,
    get_openai_endpoint,
)
from .errors import (
    ConfigurationError,
    FailureKind,
    GenerationError,
    SubmissionRejected,
)
from .models import (
    GenerationConfig,
    GenerationFailure,
    GenerationRequest,
    GenerationResult,
    GenerationSuccess,
    StrategyParameters,
    Timeframe,
)
from .prompt_composer import (
    PROMPT_VERSION,
    SYSTEM_INSTRUCTION,
    compose,
)
from .generation_client import (
    GenerationClient,
    get_generation_client,
)
from .normalizer import normalize
from .highlighter import (
    Token,
    TokenCategory,
    highlight,
    strip_tags,
    tokenize,
)
from .orchestrator import (
    GenerationOrchestrator,
    GenerationSnapshot,
    GenerationState,
    TextGenerator,
)
from .export import (
    ExportedCode,
    write_expert_advisor,
)
from .templates import (
    StrategyTemplate,
    get_template,
    list_templates,
)
from .generate_tool import (
    GENERATE_TOOL_NAME,
    GENERATE_TOOL_SCHEMA,
    TEMPLATES_TOOL_NAME,
    TEMPLATES_TOOL_SCHEMA,
    GenerateInput,
    format_result_text,
    run_generation,
)
from .widgets import (
    CODE_VIEWER_URI,
    MIME_TYPE,
    Widget,
    get_widgets,
    load_widget_html,
    resource_description,
    tool_invocation_meta,
    tool_meta,
)

__all__ = [
    # Common
    "DOWNLOAD_FILENAME",
    "GENERATION_MODEL",
    "NO_CODE_PLACEHOLDER",
    "REASONING_EFFORT",
    "get_openai_api_key",
    "get_openai_endpoint",
    # Errors
    "ConfigurationError",
    "FailureKind",
    "GenerationError",
    "SubmissionRejected",
    # Models
    "GenerationConfig",
    "GenerationFailure",
    "GenerationRequest",
    "GenerationResult",
    "GenerationSuccess",
    "StrategyParameters",
    "Timeframe",
    # Prompt composer
    "PROMPT_VERSION",
    "SYSTEM_INSTRUCTION",
    "compose",
    # Generation client (OpenAI)
    "GenerationClient",
    "get_generation_client",
    # Normalizer / highlighter
    "normalize",
    "Token",
    "TokenCategory",
    "highlight",
    "strip_tags",
    "tokenize",
    # Orchestrator
    "GenerationOrchestrator",
    "GenerationSnapshot",
    "GenerationState",
    "TextGenerator",
    # Export
    "ExportedCode",
    "write_expert_advisor",
    # Templates
    "StrategyTemplate",
    "get_template",
    "list_templates",
    # Generate tool
    "GENERATE_TOOL_NAME",
    "GENERATE_TOOL_SCHEMA",
    "TEMPLATES_TOOL_NAME",
    "TEMPLATES_TOOL_SCHEMA",
    "GenerateInput",
    "format_result_text",
    "run_generation",
    # Widgets
    "CODE_VIEWER_URI",
    "MIME_TYPE",
    "Widget",
    "get_widgets",
    "load_widget_html",
    "resource_description",
    "tool_invocation_meta",
    "tool_meta",
]
