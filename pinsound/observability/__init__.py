# noqa: D104 - package initialization
from .logging import configure_structured_logging  # noqa: F401
from .metrics import metrics_blueprint, record_analysis, record_cache_lookup, record_upstream_failure  # noqa: F401
