from __future__ import annotations

from typing import Optional

from kitgen.nodes.model import ProgramNode
from kitgen.rendering.discriminators import DiscriminatedVariant, get_identifier_function_fragment
from kitgen.rendering.fragment import Fragment, merge_fragments
from kitgen.rendering.scope import RenderScope


def get_program_accounts_fragment(program: ProgramNode, scope: RenderScope) -> Optional[Fragment]:
    if not program.accounts:
        return None
    names = scope.name_api
    enum_name = names.program_accounts_enum(program.name)
    variants = ", ".join(names.program_accounts_enum_variant(a.name) for a in program.accounts)
    identifier = get_identifier_function_fragment(
        kind="account",
        function_name=names.program_accounts_identifier_function(program.name),
        enum_name=enum_name,
        program_name=program.name,
        variants=[
            DiscriminatedVariant(
                names.program_accounts_enum_variant(account.name),
                account.discriminators,
                account.data,
            )
            for account in program.accounts
            if account.discriminators
        ],
        scope=scope,
    )
    return merge_fragments(
        [Fragment(f"export enum {enum_name} {{ {variants} }}"), identifier],
        lambda c: "\n\n".join(c),
    )
