"""Default catalog contents — the tools, resources, and prompts docmcp ships with."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docmcp import __version__
from docmcp.catalog.catalog import DEFAULT_PROTOCOL_VERSION, Catalog
from docmcp.catalog.models import (
    LOGS_TEMPLATE,
    SERVER_INFO_URI,
    TOOL_DOCS_TEMPLATE,
    TOOL_EXAMPLES_URI,
    PromptArgument,
    PromptDescriptor,
    ResourceDescriptor,
    ResourceTemplate,
    ToolDescriptor,
)
from docmcp.tools.args import (
    DocsQueryArgs,
    GenerateTextArgs,
    OpticCodeArgs,
    SearchArgs,
    VerifyOpticArgs,
    input_schema,
)

if TYPE_CHECKING:
    from docmcp.config import ServerConfig

TOOLS = [
    ToolDescriptor(
        name="generate_text",
        description="Generate text using AI based on a prompt",
        input_schema=input_schema(GenerateTextArgs),
    ),
    ToolDescriptor(
        name="optic_code_generator",
        description="Generate Optic code snippets for data retrieval and transformation",
        input_schema=input_schema(OpticCodeArgs),
    ),
    ToolDescriptor(
        name="verify_optic_code",
        description="Check Optic code for structural problems",
        input_schema=input_schema(VerifyOpticArgs),
    ),
    ToolDescriptor(
        name="marklogic_docs",
        description="Answer MarkLogic questions from the indexed documentation",
        input_schema=input_schema(DocsQueryArgs),
    ),
    ToolDescriptor(
        name="search_marklogic",
        description="Search MarkLogic database using natural language criteria",
        input_schema=input_schema(SearchArgs),
    ),
]

RESOURCES = [
    ResourceDescriptor(
        uri=SERVER_INFO_URI,
        name="Server Information",
        description="Information about this MCP server",
        mime_type="application/json",
    ),
    ResourceDescriptor(
        uri=TOOL_EXAMPLES_URI,
        name="Tool Examples",
        description="Examples of how to use the available tools",
        mime_type="text/markdown",
    ),
]

RESOURCE_TEMPLATES = [
    ResourceTemplate(
        uri_template=LOGS_TEMPLATE,
        name="Log Files by Level",
        description="Server log lines filtered by level (debug, info, warn, error, trace, all)",
        mime_type="text/plain",
    ),
    ResourceTemplate(
        uri_template=TOOL_DOCS_TEMPLATE,
        name="Tool Documentation",
        description="Detailed documentation for a specific tool",
        mime_type="text/markdown",
    ),
]

PROMPTS = [
    PromptDescriptor(
        name="code_review",
        description="Review code for best practices, security, and performance",
        arguments=[
            PromptArgument(name="code", description="The code to review", required=True),
            PromptArgument(name="language", description="Programming language"),
        ],
        template=(
            "Please review the following {{language}} code for:\n"
            "1. Best practices and coding standards\n"
            "2. Security vulnerabilities\n"
            "3. Performance optimizations\n"
            "4. Maintainability improvements\n\n"
            "Code to review:\n{{code}}\n\n"
            "Provide specific, actionable feedback with examples."
        ),
    ),
    PromptDescriptor(
        name="generate_docs",
        description="Generate comprehensive documentation for code",
        arguments=[
            PromptArgument(name="function", description="Function or API to document", required=True),
            PromptArgument(name="style", description="Documentation style (JSDoc, Sphinx, ...)"),
        ],
        template=(
            "Generate comprehensive {{style}} documentation for the following function/API:\n\n"
            "{{function}}\n\n"
            "Include:\n"
            "- Purpose and description\n"
            "- Parameters with types and descriptions\n"
            "- Return values\n"
            "- Usage examples\n"
            "- Error conditions"
        ),
    ),
]

TOOL_DOCS = {
    "generate_text": """\
# generate_text

Generates free-form text from a prompt using the configured language model.

## Parameters

- **prompt** (required): the text prompt to generate content from
- **maxTokens** (optional): upper bound on generated tokens, default 100

## Example

```json
{"name": "generate_text", "arguments": {"prompt": "Write a haiku about indexes", "maxTokens": 50}}
```

## Errors

- A missing or blank prompt is rejected.
- Without a configured model the tool answers with a mock response.
""",
    "optic_code_generator": """\
# optic_code_generator

Generates MarkLogic Optic API code for a described data retrieval or
transformation task. The model is given a reference library of Optic snippets
alongside your request.

## Parameters

- **prompt** (required): what the code should do

## Example

```json
{"name": "optic_code_generator",
 "arguments": {"prompt": "Total sales per region for 2024, highest first"}}
```

## Fallback

When no language model is configured, or the model fails, a commented
`op.fromView(...)` template is returned instead.
""",
    "verify_optic_code": """\
# verify_optic_code

Runs structural checks over Optic code:

- brackets and quotes are balanced
- the pipeline starts from an accessor such as `op.fromView` or `op.fromSQL`
- the pipeline ends in a terminal call such as `.result()`

## Parameters

- **optic_code** (required): the code to check

## Result

Text report with `VALID` or `INVALID`, the code length, and any issues found.
`metadata.isValid`, `metadata.codeLength`, and `metadata.issues` carry the
same information in structured form.
""",
    "marklogic_docs": """\
# marklogic_docs

Looks up passages in the indexed MarkLogic documentation that best match a
question.

## Parameters

- **prompt** (required): the question
- **limit** (optional): maximum number of passages, default 5
""",
    "search_marklogic": """\
# search_marklogic

Turns a natural-language request into a MarkLogic structured query and, when a
database is configured, runs it.

## Parameters

- **prompt** (required): description of the documents to find

## Result

Markdown containing the structured query as JSON and the matching documents.
`metadata.status` is `executed`, `query_only` (no database configured), or
`fallback_template` (query built without the language model).
""",
}

TOOL_EXAMPLES = """\
# Tool Usage Examples

## generate_text

```json
{"method": "tools/call",
 "params": {"name": "generate_text",
            "arguments": {"prompt": "Write a haiku about programming", "maxTokens": 50}}}
```

## optic_code_generator

```json
{"method": "tools/call",
 "params": {"name": "optic_code_generator",
            "arguments": {"prompt": "Join orders with customers and keep completed orders"}}}
```

## verify_optic_code

```json
{"method": "tools/call",
 "params": {"name": "verify_optic_code",
            "arguments": {"optic_code": "op.fromView('users', 'profiles').select(['name']).result();"}}}
```

## marklogic_docs

```json
{"method": "tools/call",
 "params": {"name": "marklogic_docs",
            "arguments": {"prompt": "How do I configure a TDE template?"}}}
```

## search_marklogic

```json
{"method": "tools/call",
 "params": {"name": "search_marklogic",
            "arguments": {"prompt": "Find research papers about neural networks"}}}
```
"""


def build_default_catalog(config: ServerConfig | None = None) -> Catalog:
    """Return the catalog docmcp serves, named after *config* when given."""
    name = config.server.name if config is not None else "docmcp"
    version = config.server.version if config is not None else __version__
    protocol_version = (
        config.server.default_protocol_version if config is not None else DEFAULT_PROTOCOL_VERSION
    )
    return Catalog(
        server_name=name,
        server_version=version,
        tools=TOOLS,
        resources=RESOURCES,
        resource_templates=RESOURCE_TEMPLATES,
        prompts=PROMPTS,
        tool_docs=TOOL_DOCS,
        tool_examples=TOOL_EXAMPLES,
        default_protocol_version=protocol_version,
    )
