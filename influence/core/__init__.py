from .models import Work, GraphNode, GraphLink, Graph, NodeSide, LinkType, Direction
from .config import InfluenceConfig, ProviderConfig, ExpansionConfig, ServerConfig
from .errors import InfluenceError, BadWorkIdError, WorkNotFoundError, UpstreamError
from .identifiers import normalize, normalize_work_id, normalize_doi, short_work_id, unique_work_ids
from .logs import setup_logging
