"""Declarative tool descriptions exposed to the model."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ParameterType = Literal["string", "integer", "number", "boolean", "array", "object"]


class ToolParameter(BaseModel):
    """A single named property of a tool's argument object."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: ParameterType = "string"
    description: str = ""
    required: bool = True


class ToolSpecification(BaseModel):
    """Name, description and parameter schema of a tool.

    Immutable once built. Names must be unique within a registry.

    Example:
        ```python
        spec = ToolSpecification(
            name="get_weather",
            description="Current weather for a city",
            parameters=[ToolParameter(name="city", description="City name")],
        )
        ```
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str = ""
    parameters: tuple[ToolParameter, ...] = ()

    @classmethod
    def build(
        cls,
        name: str,
        description: str = "",
        **parameters: ParameterType | ToolParameter,
    ) -> "ToolSpecification":
        """Shorthand: ``ToolSpecification.build("get_weather", "...", city="string")``."""
        params = [
            p if isinstance(p, ToolParameter) else ToolParameter(name=key, type=p)
            for key, p in parameters.items()
        ]
        return cls(name=name, description=description, parameters=tuple(params))

    @property
    def parameter_names(self) -> list[str]:
        return [p.name for p in self.parameters]

    def to_json_schema(self) -> dict[str, Any]:
        """JSON schema of the argument object."""
        properties: dict[str, Any] = {}
        for param in self.parameters:
            prop: dict[str, Any] = {"type": param.type}
            if param.description:
                prop["description"] = param.description
            properties[param.name] = prop
        return {
            "type": "object",
            "properties": properties,
            "required": [p.name for p in self.parameters if p.required],
        }

    def to_openai_tool(self) -> dict[str, Any]:
        """OpenAI function-tool payload."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.to_json_schema(),
            },
        }
