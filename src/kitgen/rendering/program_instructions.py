"""Program-level instruction enum, identifier, parsed union and parser."""

from __future__ import annotations

from typing import List, Optional

from kitgen.nodes.model import (
    InstructionNode,
    ProgramNode,
    all_instructions_with_subs,
    struct_from_instruction_arguments,
)
from kitgen.rendering.discriminators import DiscriminatedVariant, get_identifier_function_fragment
from kitgen.rendering.fragment import Fragment, fragment, merge_fragments, use
from kitgen.rendering.scope import RenderScope


def _enum_fragment(program: ProgramNode, instructions: List[InstructionNode], scope: RenderScope) -> Fragment:
    names = scope.name_api
    variants = ", ".join(names.program_instructions_enum_variant(i.name) for i in instructions)
    return Fragment(f"export enum {names.program_instructions_enum(program.name)} {{ {variants} }}")


def _identifier_fragment(
    program: ProgramNode, instructions: List[InstructionNode], scope: RenderScope
) -> Optional[Fragment]:
    names = scope.name_api
    return get_identifier_function_fragment(
        kind="instruction",
        function_name=names.program_instructions_identifier_function(program.name),
        enum_name=names.program_instructions_enum(program.name),
        program_name=program.name,
        variants=[
            DiscriminatedVariant(
                names.program_instructions_enum_variant(instruction.name),
                instruction.discriminators,
                struct_from_instruction_arguments(instruction.arguments),
            )
            for instruction in instructions
            if instruction.discriminators
        ],
        scope=scope,
    )


def _parsed_union_fragment(
    program: ProgramNode, instructions: List[InstructionNode], scope: RenderScope
) -> Fragment:
    names = scope.name_api
    enum_name = names.program_instructions_enum(program.name)
    header = Fragment(
        f"export type {names.program_instructions_parsed_union_type(program.name)}"
        f"<TProgram extends string = '{program.public_key}'> ="
    )
    variants = [
        fragment(
            f"| {{ instructionType: {enum_name}.{names.program_instructions_enum_variant(i.name)} }} & ",
            use(f"type {names.instruction_parsed_type(i.name)}", scope.import_from(i)),
            "<TProgram>",
        )
        for i in instructions
    ]
    union = merge_fragments([header, *variants], lambda c: "\n".join(c))
    return union.map_content(lambda c: f"{c};")  # type: ignore[union-attr]


def _parse_function_fragment(
    program: ProgramNode, instructions: List[InstructionNode], scope: RenderScope
) -> Optional[Fragment]:
    if not any(i.discriminators for i in instructions):
        return None
    names = scope.name_api
    enum_name = names.program_instructions_enum(program.name)
    assert_with_accounts = use("assertIsInstructionWithAccounts", "solanaInstructions")

    cases = []
    for instruction in instructions:
        variant = f"{enum_name}.{names.program_instructions_enum_variant(instruction.name)}"
        parse = use(names.instruction_parse_function(instruction.name), scope.import_from(instruction))
        assertion = fragment(assert_with_accounts, "(instruction); ") if instruction.accounts else None
        cases.append(
            fragment(
                f"case {variant}: {{ ",
                assertion,
                f"return {{ instructionType: {variant}, ...",
                parse,
                "(instruction) }; }",
            )
        )

    solana_error = use("SolanaError", "solanaErrors")
    error_code = use("SOLANA_ERROR__PROGRAM_CLIENTS__UNRECOGNIZED_INSTRUCTION_TYPE", "solanaErrors")
    return fragment(
        f"export function {names.program_instructions_parse_function(program.name)}<TProgram extends string>(\n",
        "    instruction: ",
        use("type Instruction", "solanaInstructions"),
        "<TProgram> & ",
        use("type InstructionWithData", "solanaInstructions"),
        "<",
        use("type ReadonlyUint8Array", "solanaCodecsCore"),
        ">\n",
        f"): {names.program_instructions_parsed_union_type(program.name)}<TProgram> {{\n",
        f"    const instructionType = {names.program_instructions_identifier_function(program.name)}(instruction);\n",
        "    switch (instructionType) {\n",
        "        ",
        merge_fragments(cases, lambda c: "\n        ".join(c)),
        "\n        default: throw new ",
        solana_error,
        "(",
        error_code,
        f', {{ instructionType: instructionType as string, programName: "{program.name}" }});\n',
        "    }\n",
        "}",
    )


def get_program_instructions_fragment(program: ProgramNode, scope: RenderScope) -> Optional[Fragment]:
    if not program.instructions:
        return None
    instructions = all_instructions_with_subs(
        program,
        leaves_only=not scope.render_parent_instructions,
        sub_instructions_first=True,
    )
    return merge_fragments(
        [
            _enum_fragment(program, instructions, scope),
            _identifier_fragment(program, instructions, scope),
            _parsed_union_fragment(program, instructions, scope),
            _parse_function_fragment(program, instructions, scope),
        ],
        lambda c: "\n\n".join(c),
    )
