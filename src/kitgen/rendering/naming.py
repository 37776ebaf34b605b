from __future__ import annotations

from kitgen.casing import camel_case, pascal_case, upper_snake_case


class NameApi:
    """Map logical node names to the identifiers emitted in generated code.

    Every method is a pure function of its argument. Subclass and override
    individual methods to change the naming policy.
    """

    # Program accounts.

    def program_accounts_enum(self, program: str) -> str:
        return f"{pascal_case(program)}Account"

    def program_accounts_enum_variant(self, account: str) -> str:
        return pascal_case(account)

    def program_accounts_identifier_function(self, program: str) -> str:
        return f"identify{pascal_case(program)}Account"

    # Program instructions.

    def program_instructions_enum(self, program: str) -> str:
        return f"{pascal_case(program)}Instruction"

    def program_instructions_enum_variant(self, instruction: str) -> str:
        return pascal_case(instruction)

    def program_instructions_identifier_function(self, program: str) -> str:
        return f"identify{pascal_case(program)}Instruction"

    def program_instructions_parsed_union_type(self, program: str) -> str:
        return f"Parsed{pascal_case(program)}Instruction"

    def program_instructions_parse_function(self, program: str) -> str:
        return f"parse{pascal_case(program)}Instruction"

    def program_address_constant(self, program: str) -> str:
        return f"{upper_snake_case(program)}_PROGRAM_ADDRESS"

    # Program plugin.

    def program_plugin_type(self, program: str) -> str:
        return f"{pascal_case(program)}Plugin"

    def program_plugin_accounts_type(self, program: str) -> str:
        return f"{pascal_case(program)}PluginAccounts"

    def program_plugin_instructions_type(self, program: str) -> str:
        return f"{pascal_case(program)}PluginInstructions"

    def program_plugin_requirements_type(self, program: str) -> str:
        return f"{pascal_case(program)}PluginRequirements"

    def program_plugin_function(self, program: str) -> str:
        return f"{camel_case(program)}Program"

    def program_plugin_key(self, program: str) -> str:
        return camel_case(program)

    def program_plugin_account_key(self, account: str) -> str:
        return camel_case(account)

    def program_plugin_instruction_key(self, instruction: str) -> str:
        return camel_case(instruction)

    # Accounts, defined types.

    def codec_function(self, name: str) -> str:
        return f"get{pascal_case(name)}Codec"

    def encoder_function(self, name: str) -> str:
        return f"get{pascal_case(name)}Encoder"

    def data_type(self, name: str) -> str:
        return pascal_case(name)

    def data_args_type(self, name: str) -> str:
        return f"{pascal_case(name)}Args"

    def enum_variant(self, variant: str) -> str:
        return pascal_case(variant)

    # Instructions.

    def instruction_type(self, instruction: str) -> str:
        return f"{pascal_case(instruction)}Instruction"

    def instruction_sync_input_type(self, instruction: str) -> str:
        return f"{pascal_case(instruction)}Input"

    def instruction_async_input_type(self, instruction: str) -> str:
        return f"{pascal_case(instruction)}AsyncInput"

    def instruction_sync_function(self, instruction: str) -> str:
        return f"get{pascal_case(instruction)}Instruction"

    def instruction_async_function(self, instruction: str) -> str:
        return f"get{pascal_case(instruction)}InstructionAsync"

    def instruction_parsed_type(self, instruction: str) -> str:
        return f"Parsed{pascal_case(instruction)}Instruction"

    def instruction_parse_function(self, instruction: str) -> str:
        return f"parse{pascal_case(instruction)}Instruction"

    # Default values.

    def pda_find_function(self, pda: str) -> str:
        return f"find{pascal_case(pda)}Pda"

    def resolver_function(self, resolver: str) -> str:
        return camel_case(resolver)
