"""Read-only node model describing a program's on-chain interface.

Every node is a frozen dataclass carrying the ``kind`` tag used by the JSON
serialization of the tree. Names are normalized to camelCase on construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, List, Literal, Optional, Union

from kitgen.casing import camel_case

IsSigner = Union[bool, Literal["either"]]
OptionalAccountStrategy = Literal["omitted", "programId"]


def _camel_name(node: object) -> None:
    object.__setattr__(node, "name", camel_case(getattr(node, "name")))


# Type nodes.


@dataclass(frozen=True)
class NumberTypeNode:
    kind: ClassVar[str] = "numberTypeNode"
    format: str = "u8"
    endian: Literal["le", "be"] = "le"


@dataclass(frozen=True)
class PublicKeyTypeNode:
    kind: ClassVar[str] = "publicKeyTypeNode"


@dataclass(frozen=True)
class StringTypeNode:
    kind: ClassVar[str] = "stringTypeNode"
    encoding: str = "utf8"


@dataclass(frozen=True)
class BooleanTypeNode:
    kind: ClassVar[str] = "booleanTypeNode"


@dataclass(frozen=True)
class BytesTypeNode:
    kind: ClassVar[str] = "bytesTypeNode"


@dataclass(frozen=True)
class FixedSizeTypeNode:
    kind: ClassVar[str] = "fixedSizeTypeNode"
    type: "TypeNode"
    size: int


@dataclass(frozen=True)
class FixedCountNode:
    kind: ClassVar[str] = "fixedCountNode"
    value: int


@dataclass(frozen=True)
class PrefixedCountNode:
    kind: ClassVar[str] = "prefixedCountNode"
    prefix: NumberTypeNode = field(default_factory=lambda: NumberTypeNode("u32"))


@dataclass(frozen=True)
class RemainderCountNode:
    kind: ClassVar[str] = "remainderCountNode"


CountNode = Union[FixedCountNode, PrefixedCountNode, RemainderCountNode]


@dataclass(frozen=True)
class ArrayTypeNode:
    kind: ClassVar[str] = "arrayTypeNode"
    item: "TypeNode"
    count: CountNode = field(default_factory=PrefixedCountNode)


@dataclass(frozen=True)
class OptionTypeNode:
    kind: ClassVar[str] = "optionTypeNode"
    item: "TypeNode"


@dataclass(frozen=True)
class DefinedTypeLinkNode:
    kind: ClassVar[str] = "definedTypeLinkNode"
    name: str

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class StructFieldTypeNode:
    kind: ClassVar[str] = "structFieldTypeNode"
    name: str
    type: "TypeNode"
    default_value: Optional["ValueNode"] = None

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class StructTypeNode:
    kind: ClassVar[str] = "structTypeNode"
    fields: List[StructFieldTypeNode] = field(default_factory=list)


TypeNode = Union[
    NumberTypeNode,
    PublicKeyTypeNode,
    StringTypeNode,
    BooleanTypeNode,
    BytesTypeNode,
    FixedSizeTypeNode,
    ArrayTypeNode,
    OptionTypeNode,
    DefinedTypeLinkNode,
    StructTypeNode,
]


# Literal value nodes.


@dataclass(frozen=True)
class NumberValueNode:
    kind: ClassVar[str] = "numberValueNode"
    number: Union[int, float]


@dataclass(frozen=True)
class StringValueNode:
    kind: ClassVar[str] = "stringValueNode"
    string: str


@dataclass(frozen=True)
class BooleanValueNode:
    kind: ClassVar[str] = "booleanValueNode"
    boolean: bool


@dataclass(frozen=True)
class PublicKeyValueNode:
    kind: ClassVar[str] = "publicKeyValueNode"
    public_key: str
    identifier: Optional[str] = None


@dataclass(frozen=True)
class BytesValueNode:
    kind: ClassVar[str] = "bytesValueNode"
    encoding: str
    data: str


@dataclass(frozen=True)
class ArrayValueNode:
    kind: ClassVar[str] = "arrayValueNode"
    items: List["ValueNode"] = field(default_factory=list)


@dataclass(frozen=True)
class NoneValueNode:
    kind: ClassVar[str] = "noneValueNode"


@dataclass(frozen=True)
class SomeValueNode:
    kind: ClassVar[str] = "someValueNode"
    value: "ValueNode"


@dataclass(frozen=True)
class EnumValueNode:
    kind: ClassVar[str] = "enumValueNode"
    enum: DefinedTypeLinkNode
    variant: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "variant", camel_case(self.variant))


@dataclass(frozen=True)
class ConstantValueNode:
    kind: ClassVar[str] = "constantValueNode"
    type: TypeNode
    value: "ValueNode"


ValueNode = Union[
    NumberValueNode,
    StringValueNode,
    BooleanValueNode,
    PublicKeyValueNode,
    BytesValueNode,
    ArrayValueNode,
    NoneValueNode,
    SomeValueNode,
    EnumValueNode,
    ConstantValueNode,
]


# Contextual value nodes: the default value of an instruction input.


@dataclass(frozen=True)
class AccountValueNode:
    kind: ClassVar[str] = "accountValueNode"
    name: str

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class ArgumentValueNode:
    kind: ClassVar[str] = "argumentValueNode"
    name: str

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class AccountBumpValueNode:
    kind: ClassVar[str] = "accountBumpValueNode"
    name: str

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class IdentityValueNode:
    kind: ClassVar[str] = "identityValueNode"


@dataclass(frozen=True)
class PayerValueNode:
    kind: ClassVar[str] = "payerValueNode"


@dataclass(frozen=True)
class ProgramIdValueNode:
    kind: ClassVar[str] = "programIdValueNode"


@dataclass(frozen=True)
class ProgramLinkNode:
    kind: ClassVar[str] = "programLinkNode"
    name: str

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class ConstantPdaSeedNode:
    kind: ClassVar[str] = "constantPdaSeedNode"
    type: TypeNode
    value: Union[ValueNode, ProgramIdValueNode]


@dataclass(frozen=True)
class VariablePdaSeedNode:
    kind: ClassVar[str] = "variablePdaSeedNode"
    name: str
    type: TypeNode

    def __post_init__(self) -> None:
        _camel_name(self)


PdaSeedNode = Union[ConstantPdaSeedNode, VariablePdaSeedNode]


@dataclass(frozen=True)
class PdaNode:
    kind: ClassVar[str] = "pdaNode"
    name: str
    seeds: List[PdaSeedNode] = field(default_factory=list)
    program_id: Optional[str] = None

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class PdaLinkNode:
    kind: ClassVar[str] = "pdaLinkNode"
    name: str

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class PdaSeedValueNode:
    kind: ClassVar[str] = "pdaSeedValueNode"
    name: str
    value: Union[AccountValueNode, ArgumentValueNode, ValueNode]

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class PdaValueNode:
    kind: ClassVar[str] = "pdaValueNode"
    pda: Union[PdaNode, PdaLinkNode]
    seeds: List[PdaSeedValueNode] = field(default_factory=list)
    program_id: Optional[Union[AccountValueNode, ArgumentValueNode]] = None


@dataclass(frozen=True)
class ResolverValueNode:
    kind: ClassVar[str] = "resolverValueNode"
    name: str
    depends_on: List[Union[AccountValueNode, ArgumentValueNode]] = field(default_factory=list)

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class ConditionalValueNode:
    kind: ClassVar[str] = "conditionalValueNode"
    condition: Union[AccountValueNode, ArgumentValueNode, ResolverValueNode]
    value: Optional[ValueNode] = None
    if_true: Optional["InstructionInputValueNode"] = None
    if_false: Optional["InstructionInputValueNode"] = None


InstructionInputValueNode = Union[
    AccountValueNode,
    ArgumentValueNode,
    AccountBumpValueNode,
    IdentityValueNode,
    PayerValueNode,
    ProgramIdValueNode,
    ProgramLinkNode,
    PdaValueNode,
    ResolverValueNode,
    ConditionalValueNode,
    NumberValueNode,
    StringValueNode,
    BooleanValueNode,
    PublicKeyValueNode,
    BytesValueNode,
    ArrayValueNode,
    NoneValueNode,
    SomeValueNode,
    EnumValueNode,
    ConstantValueNode,
]


# Discriminators.


@dataclass(frozen=True)
class ConstantDiscriminatorNode:
    kind: ClassVar[str] = "constantDiscriminatorNode"
    constant: ConstantValueNode
    offset: int = 0


@dataclass(frozen=True)
class FieldDiscriminatorNode:
    kind: ClassVar[str] = "fieldDiscriminatorNode"
    name: str
    offset: int = 0

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class SizeDiscriminatorNode:
    kind: ClassVar[str] = "sizeDiscriminatorNode"
    size: int


DiscriminatorNode = Union[
    ConstantDiscriminatorNode, FieldDiscriminatorNode, SizeDiscriminatorNode
]


# Program structure.


@dataclass(frozen=True)
class AccountNode:
    kind: ClassVar[str] = "accountNode"
    name: str
    data: StructTypeNode = field(default_factory=StructTypeNode)
    discriminators: List[DiscriminatorNode] = field(default_factory=list)

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class InstructionAccountNode:
    kind: ClassVar[str] = "instructionAccountNode"
    name: str
    is_writable: bool = False
    is_signer: IsSigner = False
    is_optional: bool = False
    default_value: Optional[InstructionInputValueNode] = None

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class InstructionArgumentNode:
    kind: ClassVar[str] = "instructionArgumentNode"
    name: str
    type: TypeNode
    default_value: Optional[InstructionInputValueNode] = None

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class InstructionRemainingAccountsNode:
    kind: ClassVar[str] = "instructionRemainingAccountsNode"
    value: Union[ArgumentValueNode, ResolverValueNode]


@dataclass(frozen=True)
class InstructionByteDeltaNode:
    kind: ClassVar[str] = "instructionByteDeltaNode"
    value: Union[NumberValueNode, AccountValueNode, ArgumentValueNode, ResolverValueNode]


@dataclass(frozen=True)
class InstructionNode:
    kind: ClassVar[str] = "instructionNode"
    name: str
    accounts: List[InstructionAccountNode] = field(default_factory=list)
    arguments: List[InstructionArgumentNode] = field(default_factory=list)
    extra_arguments: List[InstructionArgumentNode] = field(default_factory=list)
    discriminators: List[DiscriminatorNode] = field(default_factory=list)
    remaining_accounts: List[InstructionRemainingAccountsNode] = field(default_factory=list)
    byte_deltas: List[InstructionByteDeltaNode] = field(default_factory=list)
    sub_instructions: List["InstructionNode"] = field(default_factory=list)
    optional_account_strategy: OptionalAccountStrategy = "programId"

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class ProgramNode:
    kind: ClassVar[str] = "programNode"
    name: str
    public_key: str
    version: str = ""
    accounts: List[AccountNode] = field(default_factory=list)
    instructions: List[InstructionNode] = field(default_factory=list)
    pdas: List[PdaNode] = field(default_factory=list)

    def __post_init__(self) -> None:
        _camel_name(self)


@dataclass(frozen=True)
class RootNode:
    kind: ClassVar[str] = "rootNode"
    program: ProgramNode
    additional_programs: List[ProgramNode] = field(default_factory=list)

    @property
    def all_programs(self) -> List[ProgramNode]:
        return [self.program, *self.additional_programs]


def all_instructions_with_subs(
    program: ProgramNode,
    *,
    leaves_only: bool = False,
    sub_instructions_first: bool = False,
) -> List[InstructionNode]:
    """Flatten a program's instruction tree in a stable order."""

    def walk(instruction: InstructionNode) -> List[InstructionNode]:
        if not instruction.sub_instructions:
            return [instruction]
        children: List[InstructionNode] = []
        for sub in instruction.sub_instructions:
            children.extend(walk(sub))
        if leaves_only:
            return children
        if sub_instructions_first:
            return [*children, instruction]
        return [instruction, *children]

    flattened: List[InstructionNode] = []
    for instruction in program.instructions:
        flattened.extend(walk(instruction))
    return flattened


def struct_from_instruction_arguments(
    arguments: List[InstructionArgumentNode],
) -> StructTypeNode:
    fields = []
    for argument in arguments:
        default_value = argument.default_value
        # Only literal defaults can describe the bytes of a discriminator field.
        if default_value is not None and not isinstance(default_value, VALUE_NODE_TYPES):
            default_value = None
        fields.append(StructFieldTypeNode(argument.name, argument.type, default_value))
    return StructTypeNode(fields)


VALUE_NODE_TYPES = (
    NumberValueNode,
    StringValueNode,
    BooleanValueNode,
    PublicKeyValueNode,
    BytesValueNode,
    ArrayValueNode,
    NoneValueNode,
    SomeValueNode,
    EnumValueNode,
    ConstantValueNode,
)
