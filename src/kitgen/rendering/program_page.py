from __future__ import annotations

from typing import Iterable, Optional

from kitgen.nodes.model import ProgramNode
from kitgen.rendering.fragment import Fragment, fragment, merge_fragments, use
from kitgen.rendering.program_accounts import get_program_accounts_fragment
from kitgen.rendering.program_instructions import get_program_instructions_fragment
from kitgen.rendering.program_plugin import get_program_plugin_fragment
from kitgen.rendering.scope import RenderScope


def get_program_address_fragment(program: ProgramNode, scope: RenderScope) -> Fragment:
    constant = scope.name_api.program_address_constant(program.name)
    address_type = use("type Address", "solanaAddresses")
    return fragment(
        f"export const {constant} = '{program.public_key}' as ",
        address_type,
        f"<'{program.public_key}'>;",
    )


def get_program_page_fragment(program: ProgramNode, scope: RenderScope) -> Fragment:
    page = merge_fragments(
        [
            get_program_address_fragment(program, scope),
            get_program_accounts_fragment(program, scope),
            get_program_instructions_fragment(program, scope),
            get_program_plugin_fragment(program, scope),
        ],
        lambda c: "\n\n".join(c),
    )
    assert page is not None
    return page


def get_index_page_fragment(names: Iterable[str]) -> Optional[Fragment]:
    exports = sorted(set(names))
    if not exports:
        return None
    return Fragment("\n".join(f"export * from './{name}';" for name in exports))
