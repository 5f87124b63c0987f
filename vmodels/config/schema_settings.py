from pydantic import BaseModel, Field
from ..util.const import DEFAULTS

class ResolverSettings(BaseModel):
    max_chain_depth: int = Field(default=DEFAULTS["MAX_CHAIN_DEPTH"], ge=1, description="Maximum definitions in one chain")
    lookup_timeout_sec: float = Field(default=DEFAULTS["LOOKUP_TIMEOUT_SEC"], gt=0, description="Per-lookup timeout for async catalogs")
