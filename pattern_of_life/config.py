# config.py
from pathlib import Path
import os

BASE_DIR = Path(__file__).resolve().parent
DATA_PATH = os.getenv("POL_DATA_PATH", os.path.join(BASE_DIR, "data", "sample_signals.csv"))

MONGO_URI = os.getenv("POL_MONGO_URI", "mongodb://localhost:27017")
DB_NAME = "pattern_of_life"
SIGNALS_COLLECTION = "signals"

# Clustering Parameters
CLUSTER_THRESHOLD = 0.002  # degrees, box test on each axis
TOP_CLUSTERS = 6
CLUSTER_ID_OFFSET = 100

# Scoring
DATE_WEIGHT = 25
SIGNAL_WEIGHT = 5
HOTSPOT_SCORE = 50     # strictly above -> HOTSPOT / High Activity
HIGH_RISK_SCORE = 60   # strictly above -> High risk
MAX_PROBABILITY = 99

# first match wins
NAMED_SECTORS = (
    ("Walmart", "Walmart Sector"),
    ("Jacksboro", "Jacksboro Corridor"),
)

ZONE_COLORS = (
    "#ef4444",
    "#f59e0b",
    "#10b981",
    "#3b82f6",
    "#a855f7",
    "#ec4899",
)

# Gap Detection
GAP_THRESHOLD_MINUTES = 45
AOI_RADIUS = 300

# Routing
OSRM_URL = os.getenv("POL_OSRM_URL", "https://router.project-osrm.org")
MAX_ROUTE_WAYPOINTS = 25
ROUTE_TIMEOUT_SECONDS = 10.0

# Narrative analysis
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = "gemini-2.5-flash"

# Logging
DEBUG_MODE = os.getenv("POL_DEBUG", "1") == "1"
