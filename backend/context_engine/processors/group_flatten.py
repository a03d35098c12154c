"""GroupMessageFlattenProcessor: expands assistant groups into provider messages."""

from __future__ import annotations

import json

from context_engine.errors import MalformedInputError
from context_engine.processors.base import BaseProcessor, PipelineContext

GROUP_ROLE = "assistantGroup"


def tool_function_name(tool: dict) -> str:
    api_name = tool.get("apiName") or ""
    identifier = tool.get("identifier")
    return f"{identifier}__{api_name}" if identifier else api_name


def _arguments(tool: dict) -> str:
    arguments = tool.get("arguments")
    if arguments is None:
        return "{}"
    if isinstance(arguments, str):
        return arguments
    return json.dumps(arguments, ensure_ascii=False)


class GroupMessageFlattenProcessor(BaseProcessor):
    """Replace each ``assistantGroup`` with assistant + tool messages.

    A group holds ``children`` turns, each with text ``content`` and optional
    ``tools`` (``id``, ``apiName``, ``identifier``, ``arguments``, ``result``).
    Every child becomes an assistant message carrying ``tool_calls``, followed
    by one ``tool`` message per tool that already has a result.
    """

    name = "GroupMessageFlattenProcessor"

    def _flatten(self, message: dict) -> list[dict]:
        children = message.get("children") or []
        if not isinstance(children, list):
            raise MalformedInputError(
                f"assistant group {message.get('id')} has non-list children", processor=self.name
            )

        flattened: list[dict] = []
        for child in children:
            if not isinstance(child, dict):
                raise MalformedInputError(
                    f"assistant group {message.get('id')} has a non-object child",
                    processor=self.name,
                )
            tools = child.get("tools") or []
            if not isinstance(tools, list) or not all(isinstance(t, dict) for t in tools):
                raise MalformedInputError(
                    f"assistant group {message.get('id')} has malformed tools", processor=self.name
                )
            if any(not tool.get("id") for tool in tools):
                raise MalformedInputError(
                    f"assistant group {message.get('id')} has a tool without an id",
                    processor=self.name,
                )

            assistant: dict = {"role": "assistant", "content": child.get("content") or ""}
            if child.get("id"):
                assistant["id"] = child["id"]
            if tools:
                assistant["tool_calls"] = [
                    {
                        "id": tool.get("id"),
                        "type": "function",
                        "function": {"name": tool_function_name(tool), "arguments": _arguments(tool)},
                    }
                    for tool in tools
                ]
            flattened.append(assistant)

            for tool in tools:
                result = tool.get("result")
                if result is None:
                    continue
                content = result.get("content", "") if isinstance(result, dict) else result
                flattened.append(
                    {
                        "role": "tool",
                        "content": content if isinstance(content, str) else json.dumps(content),
                        "name": tool_function_name(tool),
                        "tool_call_id": tool.get("id"),
                    }
                )
        return flattened

    async def do_process(self, context: PipelineContext) -> PipelineContext:
        if not any(m.get("role") == GROUP_ROLE for m in context.messages):
            return context

        cloned = self.clone_context(context)
        messages: list[dict] = []
        groups = 0
        for message in context.messages:
            if message.get("role") == GROUP_ROLE:
                messages.extend(self._flatten(message))
                groups += 1
            else:
                messages.append(message)
        cloned.messages = messages
        cloned.metadata["assistantGroupsFlattened"] = groups
        return cloned
