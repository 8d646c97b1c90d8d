"""Tool registry for managing and invoking available tools."""

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Union

from codemate.tools.base import (
    InvalidParameterError,
    MissingParameterError,
    Tool,
    ToolError,
    ToolNotFoundError,
)
from codemate.tools.models import (
    ErrorKind,
    ToolExecutionRecord,
    ToolOutcome,
    ToolParameter,
    parse_bool,
)

logger = logging.getLogger(__name__)

ToolFunction = Callable[[dict[str, Any]], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class ToolDefinition:
    """A registered tool: its function plus the schema shown to the model."""

    name: str
    execute: ToolFunction
    description: str = ""
    parameters: dict[str, ToolParameter] = field(default_factory=dict)

    @property
    def required(self) -> list[str]:
        return [p.name for p in self.parameters.values() if p.required]

    def to_catalog_entry(self) -> dict[str, Any]:
        """Catalog entry in the shape injected into the system prompt."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": {
                name: param.to_catalog_entry() for name, param in self.parameters.items()
            },
            "required": self.required,
        }


def _coerce_parameters(
    parameters: Union[None, list[ToolParameter], dict[str, Any]],
    required: Optional[list[str]] = None,
) -> dict[str, ToolParameter]:
    """Normalize parameter declarations into typed descriptors.

    Accepts either a list of ``ToolParameter`` or a plain mapping of
    ``name -> {"type": ..., "description": ...}``. With a plain mapping the
    ``required`` list decides which parameters are required. With a list of
    descriptors, a given ``required`` list replaces their own flags.
    """
    if not parameters:
        return {}

    if isinstance(parameters, list):
        declared = {param.name: param for param in parameters}
        if required is None:
            return declared
        unknown = set(required) - set(declared)
        if unknown:
            raise ValueError(f"Required parameters not declared: {', '.join(sorted(unknown))}")
        return {
            name: param.model_copy(update={"required": name in required})
            for name, param in declared.items()
        }

    required_names = set(required or [])
    result: dict[str, ToolParameter] = {}
    for name, schema in parameters.items():
        if isinstance(schema, ToolParameter):
            result[name] = schema
            continue
        schema = schema or {}
        result[name] = ToolParameter(
            name=name,
            type=schema.get("type", "string"),
            description=schema.get("description", ""),
            required=name in required_names,
        )
    # Required names without a schema entry are still enforced
    for name in required_names - set(result):
        result[name] = ToolParameter(name=name, required=True)
    return result


def _matches_type(value: Any, type_name: str) -> bool:
    """Check that a value can be read as the declared primitive type.

    String values are checked for convertibility only; they are passed to
    the tool unchanged.
    """
    if isinstance(value, str):
        text = value.strip()
        if type_name == "integer":
            try:
                int(text)
            except ValueError:
                return False
            return True
        if type_name == "number":
            try:
                float(text)
            except ValueError:
                return False
            return True
        if type_name == "boolean":
            return parse_bool(text) is not None
        return True

    if type_name == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    if type_name == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if type_name == "boolean":
        return isinstance(value, bool)
    return True


class ToolRegistry:
    """Registry for managing available tools.

    Holds named tool definitions, renders the tool catalog for the model and
    dispatches invocations. One registry belongs to one chat session; it is
    constructed explicitly and passed to the orchestrator.
    """

    def __init__(self):
        """Initialize the tool registry."""
        self._tools: dict[str, ToolDefinition] = {}
        self._last_results: dict[str, ToolExecutionRecord] = {}

    def register(
        self,
        name: str,
        execute: ToolFunction,
        description: str = "",
        parameters: Union[None, list[ToolParameter], dict[str, Any]] = None,
        required: Optional[list[str]] = None,
    ) -> ToolDefinition:
        """Register a tool, replacing any existing tool with the same name.

        Args:
            name: Unique tool name
            execute: Function called with the parameter mapping; may be async
            description: Description shown to the model
            parameters: List of ``ToolParameter`` or a name -> schema mapping
            required: Required parameter names; overrides the descriptors' own
                flags when ``parameters`` is a list

        Raises:
            ValueError: If ``required`` names a parameter the list does not declare

        Returns:
            The stored ToolDefinition
        """
        if name in self._tools:
            logger.warning(f"Tool '{name}' is already registered, replacing it")

        definition = ToolDefinition(
            name=name,
            execute=execute,
            description=description,
            parameters=_coerce_parameters(parameters, required),
        )
        self._tools[name] = definition
        logger.info(f"Registered tool: {name}")
        return definition

    def register_tool(self, tool: Tool) -> ToolDefinition:
        """Register a class-based tool."""
        return self.register(
            tool.name,
            tool.execute,
            description=tool.description,
            parameters=list(tool.parameters),
        )

    def unregister(self, name: str) -> bool:
        """Unregister a tool.

        Returns:
            True if tool was unregistered, False if not found
        """
        if name in self._tools:
            del self._tools[name]
            logger.info(f"Unregistered tool: {name}")
            return True
        return False

    def get(self, name: str) -> Optional[ToolDefinition]:
        """Get a tool definition by name."""
        return self._tools.get(name)

    def list_tools(self) -> list[dict[str, Any]]:
        """Catalog of all registered tools, in registration order."""
        return [tool.to_catalog_entry() for tool in self._tools.values()]

    def validate(self, name: str, params: dict[str, Any]) -> ToolDefinition:
        """Check that a tool exists and the parameters satisfy its schema.

        Raises:
            ToolNotFoundError: If the tool is not registered
            MissingParameterError: Listing every absent required parameter
            InvalidParameterError: If a value does not fit its declared type
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError.for_tool(name)

        missing = [p for p in tool.required if p not in params]
        if missing:
            raise MissingParameterError.for_tool(name, missing)

        for param_name, value in params.items():
            param = tool.parameters.get(param_name)
            if param is None:
                continue
            # A blank optional value means "use the default"
            if not param.required and isinstance(value, str) and not value.strip():
                continue
            if not _matches_type(value, param.type):
                raise InvalidParameterError(
                    f"Parameter '{param_name}' for tool '{name}' must be of type "
                    f"{param.type}, got {value!r}"
                )

        return tool

    async def invoke(self, name: str, params: Optional[dict[str, Any]] = None) -> ToolOutcome:
        """Validate and run a tool.

        Never raises for dispatch or tool failures; they come back as an
        error outcome.

        Args:
            name: Tool name
            params: Parameter mapping passed to the tool unchanged

        Returns:
            ToolOutcome with the tool's value or the error kind and message
        """
        params = params if params is not None else {}

        try:
            tool = self.validate(name, params)
        except ToolError as e:
            logger.warning(f"Rejected tool call {name}: {e}")
            return ToolOutcome.failure(e.kind, str(e))

        logger.info(f"Executing tool: {name}")
        try:
            result = tool.execute(params)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.error(f"Error executing tool '{name}': {e}", exc_info=True)
            return ToolOutcome.failure(ErrorKind.EXECUTION, str(e))

        self._last_results[name] = ToolExecutionRecord(
            name=name,
            parameters=dict(params),
            result=result,
        )
        return ToolOutcome.success(result)

    def last_result(self, name: str) -> Optional[ToolExecutionRecord]:
        """Most recent successful execution of a tool, if any."""
        return self._last_results.get(name)

    @property
    def last_results(self) -> dict[str, ToolExecutionRecord]:
        return dict(self._last_results)

    def clear(self) -> None:
        """Clear all registered tools and cached results."""
        self._tools.clear()
        self._last_results.clear()
        logger.info("Cleared all tools from registry")

    def __len__(self) -> int:
        """Get number of registered tools."""
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        """Check if tool is registered."""
        return name in self._tools

    def __str__(self) -> str:
        """String representation."""
        return f"ToolRegistry({len(self._tools)} tools)"

    def __repr__(self) -> str:
        """Representation."""
        tools = ", ".join(self._tools.keys())
        return f"<ToolRegistry tools=[{tools}]>"
