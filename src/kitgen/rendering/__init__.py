from kitgen.rendering.fragment import Fragment, fragment, merge_fragments, use
from kitgen.rendering.import_map import ImportInfo, ImportMap, merge_import_maps, parse_import_input
from kitgen.rendering.input_defaults import (
    RESOLVER_SCOPE_FEATURE,
    InputDefaultContext,
    get_instruction_input_default_fragment,
    get_instruction_input_defaults_fragment,
)
from kitgen.rendering.naming import NameApi
from kitgen.rendering.program_plugin import get_program_plugin_fragment
from kitgen.rendering.render_map import RenderResult, get_render_map, write_render_map
from kitgen.rendering.scope import RenderScope

__all__ = [
    "Fragment",
    "ImportInfo",
    "ImportMap",
    "InputDefaultContext",
    "NameApi",
    "RESOLVER_SCOPE_FEATURE",
    "RenderResult",
    "RenderScope",
    "fragment",
    "get_instruction_input_default_fragment",
    "get_instruction_input_defaults_fragment",
    "get_program_plugin_fragment",
    "get_render_map",
    "merge_fragments",
    "merge_import_maps",
    "parse_import_input",
    "use",
    "write_render_map",
]
