"""Registration of the tools docmcp ships with."""

from __future__ import annotations

from docmcp.collaborators.docs import DocsRetriever
from docmcp.collaborators.llm import TextGenerator
from docmcp.collaborators.search import DocumentSearch
from docmcp.tools.docs import MarkLogicDocsTool
from docmcp.tools.optic import OpticCodeGeneratorTool, VerifyOpticCodeTool
from docmcp.tools.registry import ToolRegistry
from docmcp.tools.search import SearchMarkLogicTool
from docmcp.tools.text import GenerateTextTool


def build_tool_registry(
    *,
    generator: TextGenerator | None = None,
    search: DocumentSearch | None = None,
    docs: DocsRetriever | None = None,
) -> ToolRegistry:
    """Return a registry with every built-in tool bound to the given collaborators.

    ``None`` for a collaborator selects that tool's offline behaviour.
    """
    registry = ToolRegistry()
    registry.register("generate_text", GenerateTextTool(generator))
    registry.register("optic_code_generator", OpticCodeGeneratorTool(generator))
    registry.register("verify_optic_code", VerifyOpticCodeTool())
    registry.register("marklogic_docs", MarkLogicDocsTool(docs))
    registry.register("search_marklogic", SearchMarkLogicTool(generator, search))
    return registry
