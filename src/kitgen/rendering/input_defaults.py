"""Lower instruction input default values into initialization statements.

Each default value is interpreted against the input it belongs to and
produces either a :class:`Fragment` assigning the computed value or ``None``
when no per-input code is needed. Resolver calls mark their fragment with
:data:`RESOLVER_SCOPE_FEATURE`; the per-instruction block declares the
``resolverScope`` variable once when any of its inputs carries it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, assert_never

from kitgen.casing import camel_case
from kitgen.nodes.model import (
    VALUE_NODE_TYPES,
    AccountBumpValueNode,
    AccountValueNode,
    ArgumentValueNode,
    ConditionalValueNode,
    ConstantPdaSeedNode,
    IdentityValueNode,
    InstructionInputValueNode,
    InstructionNode,
    OptionalAccountStrategy,
    PayerValueNode,
    PdaNode,
    PdaValueNode,
    ProgramIdValueNode,
    ProgramLinkNode,
    PublicKeyValueNode,
    ResolverValueNode,
)
from kitgen.nodes.resolved import ResolvedInstructionInput, resolved_instruction_inputs
from kitgen.rendering.async_defaults import is_async_default_value
from kitgen.rendering.fragment import Fragment, fragment, merge_fragments, use
from kitgen.rendering.scope import RenderScope
from kitgen.rendering.type_manifest import get_type_encoder_fragment, get_value_fragment

RESOLVER_SCOPE_FEATURE = "instruction:resolverScopeVariable"
RESOLVER_SCOPE_DECLARATION = "const resolverScope = { programAddress, accounts, args };"


@dataclass(frozen=True)
class InputDefaultContext:
    input: ResolvedInstructionInput
    scope: RenderScope
    use_async: bool = False
    optional_account_strategy: OptionalAccountStrategy = "programId"

    def with_default_value(self, value: InstructionInputValueNode) -> "InputDefaultContext":
        return replace(self, input=replace(self.input, default_value=value))


def _shared(name: str) -> Fragment:
    return use(name, "shared")


def _address_literal(public_key: str) -> Fragment:
    address_type = use("type Address", "solanaAddresses")
    return fragment(f"'{public_key}' as ", address_type, f"<'{public_key}'>")


def _assign(
    context: InputDefaultContext, rendered: Fragment, is_writable: Optional[bool] = None
) -> Fragment:
    target = context.input
    name = camel_case(target.name)
    if target.is_account and isinstance(target.default_value, ResolverValueNode):
        return fragment(f"accounts.{name} = {{ ...accounts.{name}, ...", rendered, " };")
    if target.is_account and is_writable is None:
        return fragment(f"accounts.{name}.value = ", rendered, ";")
    if target.is_account:
        flag = "true" if is_writable else "false"
        return fragment(
            f"accounts.{name}.value = ", rendered, f";\naccounts.{name}.isWritable = {flag};"
        )
    return fragment(f"args.{name} = ", rendered, ";")


def _account_value(context: InputDefaultContext, value: AccountValueNode) -> Fragment:
    target = context.input
    reference = f"(accounts.{camel_case(value.name)}.value)"
    if target.is_account and target.resolved_is_signer and not target.is_signer:
        return fragment(_shared("expectTransactionSigner"), reference, ".address")
    if target.is_account:
        return fragment(_shared("expectSome"), reference)
    return fragment(_shared("expectAddress"), reference)


def _pda_program_override(value: PdaValueNode) -> Optional[Fragment]:
    program_id = value.program_id
    if isinstance(program_id, AccountValueNode):
        return fragment(_shared("expectAddress"), f"(accounts.{camel_case(program_id.name)}.value)")
    if isinstance(program_id, ArgumentValueNode):
        return fragment(_shared("expectAddress"), f"(args.{camel_case(program_id.name)})")
    return None


def _inline_pda(context: InputDefaultContext, value: PdaValueNode, pda: PdaNode) -> Fragment:
    scope = context.scope
    program = _pda_program_override(value)
    if program is None:
        program = _address_literal(pda.program_id) if pda.program_id else Fragment("programAddress")

    seed_values = {seed.name: seed.value for seed in value.seeds}
    seeds: List[Fragment] = []
    for seed in pda.seeds:
        if isinstance(seed, ConstantPdaSeedNode) and isinstance(seed.value, ProgramIdValueNode):
            seeds.append(fragment(use("getAddressEncoder", "solanaAddresses"), "().encode(", program, ")"))
            continue
        encoder = get_type_encoder_fragment(seed.type, scope)
        if isinstance(seed, ConstantPdaSeedNode):
            seeds.append(fragment(encoder, ".encode(", get_value_fragment(seed.value, scope), ")"))
            continue
        seed_value = seed_values.get(seed.name)
        if seed_value is None:
            # Seeds without a provided value are left out of the derivation.
            continue
        if isinstance(seed_value, AccountValueNode):
            encoded = fragment(_shared("expectAddress"), f"(accounts.{camel_case(seed_value.name)}.value)")
        elif isinstance(seed_value, ArgumentValueNode):
            encoded = fragment(_shared("expectSome"), f"(args.{camel_case(seed_value.name)})")
        else:
            encoded = get_value_fragment(seed_value, scope)
        seeds.append(fragment(encoder, ".encode(", encoded, ")"))

    if program.content != "programAddress":
        program = fragment("programAddress: ", program)
    derive = use("getProgramDerivedAddress", "solanaAddresses")
    seed_list = merge_fragments(seeds, lambda c: ", ".join(c))
    return fragment("await ", derive, "({ ", program, ", seeds: [", seed_list, "] })")


def _linked_pda(context: InputDefaultContext, value: PdaValueNode) -> Fragment:
    scope = context.scope
    find_pda = use(scope.name_api.pda_find_function(value.pda.name), scope.import_from(value.pda))
    seeds: List[Fragment] = []
    for seed in value.seeds:
        if isinstance(seed.value, AccountValueNode):
            rendered = fragment(_shared("expectAddress"), f"(accounts.{camel_case(seed.value.name)}.value)")
        elif isinstance(seed.value, ArgumentValueNode):
            rendered = fragment(_shared("expectSome"), f"(args.{camel_case(seed.value.name)})")
        else:
            rendered = get_value_fragment(seed.value, scope)
        seeds.append(fragment(f"{seed.name}: ", rendered))

    arguments: List[Optional[Fragment]] = []
    seed_object = merge_fragments(seeds, lambda c: ", ".join(c))
    if seed_object is not None:
        arguments.append(seed_object.map_content(lambda c: f"{{ {c} }}"))
    program = _pda_program_override(value)
    if program is not None:
        arguments.append(fragment("{ programAddress: ", program, " }"))
    return fragment("await ", find_pda, "(", merge_fragments(arguments, lambda c: ", ".join(c)), ")")


def _resolver_call(context: InputDefaultContext, resolver: ResolverValueNode) -> Fragment:
    scope = context.scope
    function = use(scope.name_api.resolver_function(resolver.name), scope.import_from(resolver))
    awaited = "await " if context.use_async and resolver.name in scope.async_resolvers else ""
    return fragment(awaited, function, "(resolverScope)").add_features([RESOLVER_SCOPE_FEATURE])


def _resolve_branch(
    context: InputDefaultContext, value: Optional[InstructionInputValueNode]
) -> Optional[Fragment]:
    if value is None:
        return None
    return get_instruction_input_default_fragment(context.with_default_value(value))


def _conditional(context: InputDefaultContext, value: ConditionalValueNode) -> Optional[Fragment]:
    if_true = _resolve_branch(context, value.if_true)
    if_false = _resolve_branch(context, value.if_false)
    if if_true is None and if_false is None:
        return None

    negated = if_true is None
    bang = "!" if negated else ""
    condition_node = value.condition
    if isinstance(condition_node, ResolverValueNode):
        condition = fragment(bang, _resolver_call(context, condition_node))
    else:
        if isinstance(condition_node, AccountValueNode):
            compared = f"accounts.{camel_case(condition_node.name)}.value"
        else:
            compared = f"args.{camel_case(condition_node.name)}"
        if value.value is not None:
            operator = "!==" if negated else "==="
            condition = fragment(f"{compared} {operator} ", get_value_fragment(value.value, context.scope))
        else:
            condition = Fragment(f"{bang}{compared}")

    if if_true is not None and if_false is not None:
        return fragment("if (", condition, ") {\n", if_true, "\n} else {\n", if_false, "\n}")
    return fragment("if (", condition, ") {\n", if_true or if_false, "\n}")


def get_instruction_input_default_fragment(context: InputDefaultContext) -> Optional[Fragment]:
    """Return the statements initializing one input, or ``None`` if none are needed.

    Synchronous builders skip any default value that needs suspension.
    """
    default_value = context.input.default_value
    if default_value is None:
        return None
    scope = context.scope
    if not context.use_async and is_async_default_value(default_value, scope.async_resolvers):
        return None

    if isinstance(default_value, AccountValueNode):
        return _assign(context, _account_value(context, default_value))
    if isinstance(default_value, PdaValueNode):
        if isinstance(default_value.pda, PdaNode):
            return _assign(context, _inline_pda(context, default_value, default_value.pda))
        return _assign(context, _linked_pda(context, default_value))
    if isinstance(default_value, PublicKeyValueNode):
        return _assign(context, _address_literal(default_value.public_key))
    if isinstance(default_value, ProgramLinkNode):
        constant = scope.name_api.program_address_constant(default_value.name)
        return _assign(context, use(constant, scope.import_from(default_value)), False)
    if isinstance(default_value, ProgramIdValueNode):
        target = context.input
        if context.optional_account_strategy == "programId" and target.is_account and target.is_optional:
            return None
        return _assign(context, Fragment("programAddress"), False)
    if isinstance(default_value, (IdentityValueNode, PayerValueNode)):
        return None
    if isinstance(default_value, AccountBumpValueNode):
        bump = f"(accounts.{camel_case(default_value.name)}.value)[1]"
        return _assign(context, fragment(_shared("expectProgramDerivedAddress"), bump))
    if isinstance(default_value, ArgumentValueNode):
        return _assign(context, fragment(_shared("expectSome"), f"(args.{camel_case(default_value.name)})"))
    if isinstance(default_value, ResolverValueNode):
        return _assign(context, _resolver_call(context, default_value))
    if isinstance(default_value, ConditionalValueNode):
        return _conditional(context, default_value)
    if isinstance(default_value, VALUE_NODE_TYPES):
        return _assign(context, get_value_fragment(default_value, scope))
    assert_never(default_value)


def get_instruction_input_defaults_fragment(
    instruction: InstructionNode,
    scope: RenderScope,
    use_async: bool,
    resolved_inputs: Optional[List[ResolvedInstructionInput]] = None,
) -> Optional[Fragment]:
    """Initialize every defaulted input of ``instruction`` in dependency order."""
    if resolved_inputs is None:
        resolved_inputs = resolved_instruction_inputs(instruction)
    defaults = merge_fragments(
        [
            get_instruction_input_default_fragment(
                InputDefaultContext(
                    input=item,
                    scope=scope,
                    use_async=use_async,
                    optional_account_strategy=instruction.optional_account_strategy,
                )
            )
            for item in resolved_inputs
        ],
        lambda c: "\n".join(c),
    )
    if defaults is None or RESOLVER_SCOPE_FEATURE not in defaults.features:
        return defaults
    return defaults.map_content(lambda c: f"{RESOLVER_SCOPE_DECLARATION}\n{c}")
