from .context import BuildContext
from .expansion import FrontierExpander, SideResult, influence_key, is_temporally_consistent
from .assembly import GraphAssembler, compute_node_size
from .builder import GraphBuilder, build_graph, parse_graph_params, clamp_integer
