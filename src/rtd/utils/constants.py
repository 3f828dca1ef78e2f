"""RTD Constants and Configuration Values."""

# Store key for the module params published by the identity SDK
PLATFORM_CONFIG_KEY: str = "permutive-prebid-rtd"

# Cohort source keys written by the identity SDK
STANDARD_COHORTS_KEY: str = "_psegs"  # Filtered to >= STANDARD_COHORT_MIN_ID
DCR_COHORTS_KEY: str = "_pcrprs"  # Data clean room cohorts
SSP_SIGNALS_KEY: str = "_pssps"  # {"ssps": [...], "cohorts": [...]}
CUSTOM_COHORTS_KEY: str = "_pprebid"  # Unified custom cohorts
TOPICS_KEY: str = "_ppsts"  # Topics keyed by taxonomy version

# Legacy per-destination custom cohort keys, merged into the unified list
LEGACY_CUSTOM_COHORT_KEYS: list[str] = [
    "_papns",  # AppNexus / Xandr
    "_prubicons",  # Rubicon / Magnite
    "_pindexs",  # Index Exchange
    "_pdfps",  # Google Ad Manager
]

# Standard cohort ids start here; smaller ids are internal
STANDARD_COHORT_MIN_ID: int = 1_000_000

# Reserved ORTB2 keywords and provider names
PROVIDER_NAME: str = "permutive.com"
STANDARD_KEYWORD: str = "p_standard"
STANDARD_AUD_KEYWORD: str = "p_standard_aud"
CUSTOM_COHORTS_KEYWORD: str = "permutive"

# Bidders that always receive custom cohorts
LEGACY_CUSTOM_COHORT_BIDDERS: list[str] = ["ix", "rubicon", "appnexus", "gam"]

# Bidder code aliases used by the ad unit path
BIDDER_ALIASES: dict[str, str] = {
    "appnexusAst": "appnexus",
}

# Module defaults
DEFAULT_MAX_SEGS: int = 500
DEFAULT_WAIT_FOR_IT: bool = False

# Sentinel for cohort ids with no taxonomy mapping
UNKNOWN_TAXONOMY_ID: str = "_unknown_"

# SDK readiness stage the second pass waits for
SDK_READY_STAGE: str = "realtime"
