# utils/constants.py
# CodeMentor — Single source of truth for all magic numbers and fixed strings.
# No other file defines constants. Import from here only.

# ─────────────────────────────────────────────
# EXPLANATION OUTPUT
# ─────────────────────────────────────────────

FALLBACK_EXPLANATION: str = "Unable to generate explanation"
PROVENANCE_LABEL: str     = "AI Generated"

EXPLAIN_MODE_SIMPLE: str   = "simple"
EXPLAIN_MODE_DETAILED: str = "detailed"

# ─────────────────────────────────────────────
# CONFIDENCE HEURISTIC
# clamp(BASE - PER_LINE * lines + reply_len / DIVISOR, MIN, MAX)
# Uncalibrated. Kept bit-for-bit compatible with the browser client.
# ─────────────────────────────────────────────

CONFIDENCE_BASE: int            = 85
CONFIDENCE_LINE_PENALTY: int    = 2
CONFIDENCE_LENGTH_DIVISOR: int  = 20
CONFIDENCE_MIN: int             = 60
CONFIDENCE_MAX: int             = 95

# ─────────────────────────────────────────────
# GEMINI / LLM CONFIGURATION
# ─────────────────────────────────────────────

GEMINI_BASE_URL: str  = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_MODEL: str     = "gemini-2.0-flash"
GEMINI_TIMEOUT_S: int = 60      # requests has no default timeout

EXPLAIN_TEMPERATURE: float  = 0.7
EXPLAIN_MAX_TOKENS: int     = 1000
PROBLEM_TEMPERATURE: float  = 0.8   # more variety across generated problems
PROBLEM_MAX_TOKENS: int     = 2000

# ─────────────────────────────────────────────
# PERSISTENCE
# ─────────────────────────────────────────────

DEFAULT_DATABASE_URL: str       = "sqlite:///./codementor.db"
PRACTICE_PROBLEMS_TABLE: str    = "practice_problems"

PROBLEM_LIST_DEFAULT_LIMIT: int = 10    # matches the Practice page sidebar
PROBLEM_LIST_MAX_LIMIT: int     = 50

# ─────────────────────────────────────────────
# CORS
# ─────────────────────────────────────────────

CORS_ALLOW_ORIGIN: str  = "*"
CORS_ALLOW_HEADERS: list[str] = ["authorization", "x-client-info", "apikey", "content-type"]

# ─────────────────────────────────────────────
# SERVER CONFIGURATION
# ─────────────────────────────────────────────

SERVER_HOST: str = "0.0.0.0"
SERVER_PORT: int = 8000
SERVICE_NAME: str    = "CodeMentor"
SERVICE_VERSION: str = "1.0.0"
