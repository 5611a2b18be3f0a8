"""Generic (framework-side) chat types exchanged with the agent runtime."""

from enum import Enum
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field


class FinishReason(str, Enum):
    """Why generation ended, in the framework's vocabulary."""
    UNSPECIFIED = 'FINISH_REASON_UNSPECIFIED'
    STOP = 'STOP'
    MAX_TOKENS = 'MAX_TOKENS'


@dataclass
class FunctionCall:
    """A model-issued request to invoke a caller-defined function."""
    name: str = ''
    args: Dict[str, Any] = field(default_factory=dict)
    id: str = ''

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name, 'args': self.args}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FunctionCall':
        return cls(
            name=data.get('name', ''),
            args=data.get('args') or {},
            id=data.get('id', '')
        )


@dataclass
class FunctionResponse:
    """The caller's result for an earlier function call, correlated by id."""
    name: str = ''
    response: Dict[str, Any] = field(default_factory=dict)
    id: str = ''

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name, 'response': self.response}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FunctionResponse':
        return cls(
            name=data.get('name', ''),
            response=data.get('response') or {},
            id=data.get('id', '')
        )


@dataclass
class Part:
    """
    One piece of a turn.

    Exactly one of text, function_call or function_response is populated.
    """
    text: str = ''
    function_call: Optional[FunctionCall] = None
    function_response: Optional[FunctionResponse] = None

    @classmethod
    def from_text(cls, text: str) -> 'Part':
        return cls(text=text)

    @classmethod
    def from_function_call(cls, name: str, args: Dict[str, Any], call_id: str = '') -> 'Part':
        return cls(function_call=FunctionCall(name=name, args=args, id=call_id))

    @classmethod
    def from_function_response(cls, name: str, response: Dict[str, Any], call_id: str = '') -> 'Part':
        return cls(function_response=FunctionResponse(name=name, response=response, id=call_id))

    def to_dict(self) -> dict:
        if self.function_call is not None:
            return {'function_call': self.function_call.to_dict()}
        if self.function_response is not None:
            return {'function_response': self.function_response.to_dict()}
        return {'text': self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Part':
        if data.get('function_call') is not None:
            return cls(function_call=FunctionCall.from_dict(data['function_call']))
        if data.get('function_response') is not None:
            return cls(function_response=FunctionResponse.from_dict(data['function_response']))
        return cls(text=data.get('text', ''))


@dataclass
class Content:
    """A single conversational turn: a role plus its ordered parts."""
    role: str = ''
    parts: List[Part] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str, role: str = 'user') -> 'Content':
        return cls(role=role, parts=[Part.from_text(text)])

    def to_dict(self) -> dict:
        return {'role': self.role, 'parts': [part.to_dict() for part in self.parts]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Content':
        return cls(
            role=data.get('role', ''),
            parts=[Part.from_dict(p) for p in data.get('parts') or []]
        )


@dataclass
class Schema:
    """Structured parameter schema for a function declaration."""
    type: str = ''
    description: str = ''
    enum: List[str] = field(default_factory=list)
    items: Optional['Schema'] = None
    properties: Dict[str, 'Schema'] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Schema':
        items = data.get('items')
        return cls(
            type=data.get('type', ''),
            description=data.get('description', ''),
            enum=list(data.get('enum') or []),
            items=cls.from_dict(items) if items is not None else None,
            properties={
                name: cls.from_dict(prop)
                for name, prop in (data.get('properties') or {}).items()
            },
            required=list(data.get('required') or [])
        )


@dataclass
class FunctionDeclaration:
    """A callable tool offered to the model."""
    name: str
    description: str = ''
    parameters: Optional[Schema] = None
    parameters_json_schema: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FunctionDeclaration':
        parameters = data.get('parameters')
        return cls(
            name=data.get('name', ''),
            description=data.get('description', ''),
            parameters=Schema.from_dict(parameters) if parameters is not None else None,
            parameters_json_schema=data.get('parameters_json_schema')
        )


@dataclass
class Tool:
    """A group of function declarations."""
    function_declarations: List[FunctionDeclaration] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Tool':
        return cls(function_declarations=[
            FunctionDeclaration.from_dict(fn)
            for fn in data.get('function_declarations') or []
        ])


@dataclass
class GenerateContentConfig:
    """
    Generation options for one request.

    None means "leave the provider default alone"; 0.0 is a real value for
    temperature and top_p.
    """
    system_instruction: Optional[Content] = None
    tools: List[Tool] = field(default_factory=list)
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    max_output_tokens: Optional[int] = None
    stop_sequences: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GenerateContentConfig':
        system_instruction = data.get('system_instruction')
        if isinstance(system_instruction, str):
            system_instruction = Content.from_text(system_instruction, role='system')
        elif system_instruction is not None:
            system_instruction = Content.from_dict(system_instruction)

        return cls(
            system_instruction=system_instruction,
            tools=[Tool.from_dict(t) for t in data.get('tools') or []],
            temperature=data.get('temperature'),
            top_p=data.get('top_p'),
            max_output_tokens=data.get('max_output_tokens'),
            stop_sequences=list(data.get('stop_sequences') or [])
        )


@dataclass
class LLMRequest:
    """A generic chat request: ordered turns plus generation options."""
    contents: List[Content] = field(default_factory=list)
    config: Optional[GenerateContentConfig] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LLMRequest':
        config = data.get('config')
        return cls(
            contents=[Content.from_dict(c) for c in data.get('contents') or []],
            config=GenerateContentConfig.from_dict(config) if config is not None else None
        )


@dataclass
class UsageMetadata:
    """Token usage reported by the provider."""
    prompt_token_count: int = 0
    candidates_token_count: int = 0
    total_token_count: int = 0

    def to_dict(self) -> dict:
        return {
            'prompt_token_count': self.prompt_token_count,
            'candidates_token_count': self.candidates_token_count,
            'total_token_count': self.total_token_count,
        }


@dataclass
class LLMResponse:
    """One unit of model output handed back to the framework."""
    content: Optional[Content] = None
    partial: bool = False
    turn_complete: bool = False
    finish_reason: Optional[FinishReason] = None
    usage_metadata: Optional[UsageMetadata] = None

    def to_dict(self) -> dict:
        return {
            'content': self.content.to_dict() if self.content is not None else None,
            'partial': self.partial,
            'turn_complete': self.turn_complete,
            'finish_reason': self.finish_reason.value if self.finish_reason is not None else None,
            'usage_metadata': self.usage_metadata.to_dict() if self.usage_metadata is not None else None,
        }
