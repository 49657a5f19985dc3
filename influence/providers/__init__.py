from .base import WorkSource
from .openalex import OpenAlexSource, parse_work
