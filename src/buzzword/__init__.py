__version__ = "0.1.0"

from .ingest import IngestionService
from .modules.intelligence.ranking import compute_ranking
from .service import Publisher, serve
from .storage import FrequencyStore

__all__ = ["__version__", "IngestionService", "compute_ranking", "Publisher", "serve", "FrequencyStore"]
